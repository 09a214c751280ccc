"""
Handles CSV loading and aggregation of measurements into test samples.
"""

# Aggregation summary: coerce values to numeric and drop anything that is not,
# convert UTC sampling timestamps to the local reporting timezone, then either
# keep every reading (raw) or average readings per local day or calendar
# month. Each bucket contributes one observation to the sample.

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

AGGREGATIONS = ("month", "daily", "raw")
DEFAULT_AGGREGATION = "month"
DEFAULT_TIMEZONE = "Asia/Manila"
AGG_VALUE_COL = "agg_value"
BUCKET_COL = "bucket_key"


def load_measurements(filepath):
    """
    Load measurement records from a CSV file.

    Args:
        filepath (str): Path to the CSV file.

    Returns:
        pd.DataFrame: Loaded DataFrame.
    """
    return pd.read_csv(filepath)


def aggregate_measurements(
    df: pd.DataFrame,
    value_col: str = "value",
    time_col: str = "sampled_at",
    group_col: Optional[str] = None,
    aggregation: str = DEFAULT_AGGREGATION,
    tz: str = DEFAULT_TIMEZONE,
) -> pd.DataFrame:
    """Aggregate raw readings into the observations used by the tests.

    Args:
        df: Long-format measurements with at least ``value_col`` and
            ``time_col``.
        value_col: Column holding the measured values.
        time_col: Column holding sampling timestamps. Naive timestamps are
            read as UTC.
        group_col: Optional column identifying the water body or group.
        aggregation: ``"month"`` (mean per local calendar month), ``"daily"``
            (mean per local day) or ``"raw"`` (every reading).
        tz: Timezone used to assign readings to local days and months.

    Returns:
        pd.DataFrame: Columns ``[group_col,] bucket_key, agg_value`` ordered by
        bucket. ``bucket_key`` is ``YYYY-MM-01`` for months, ``YYYY-MM-DD`` for
        days and the local timestamp for raw readings.

    Raises:
        ConfigurationError: If ``aggregation`` is unknown or a required column
            is missing.
    """
    if aggregation not in AGGREGATIONS:
        raise ConfigurationError(
            f"aggregation must be one of {AGGREGATIONS}, got {aggregation!r}"
        )
    required = [value_col, time_col] + ([group_col] if group_col else [])
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ConfigurationError(f"Input data is missing required columns: {missing}")

    keys = [group_col] if group_col else []
    working = df[keys + [time_col, value_col]].copy()
    working[value_col] = pd.to_numeric(working[value_col], errors="coerce")
    working[time_col] = pd.to_datetime(working[time_col], utc=True, errors="coerce")
    n_before = len(working)
    working = working.dropna(subset=[value_col, time_col])
    dropped = n_before - len(working)
    if dropped:
        logger.warning("Dropped %d rows with non-numeric values or unparseable timestamps", dropped)

    local = working[time_col].dt.tz_convert(tz)
    if aggregation == "raw":
        out = working[keys].copy()
        out[BUCKET_COL] = local
        out[AGG_VALUE_COL] = working[value_col].astype(float)
        return out.sort_values(keys + [BUCKET_COL]).reset_index(drop=True)

    fmt = "%Y-%m-01" if aggregation == "month" else "%Y-%m-%d"
    working[BUCKET_COL] = local.dt.strftime(fmt)
    out = (
        working.groupby(keys + [BUCKET_COL], sort=True)[value_col]
        .mean()
        .reset_index()
        .rename(columns={value_col: AGG_VALUE_COL})
    )
    logger.debug("Aggregated %d readings into %d %s buckets", len(working), len(out), aggregation)
    return out


def extract_samples(
    df: pd.DataFrame,
    value_col: str = AGG_VALUE_COL,
    group_col: Optional[str] = None,
    groups: Optional[Sequence] = None,
) -> Dict[object, np.ndarray]:
    """Split a table into finite float samples keyed by group.

    Without ``group_col`` the whole column becomes one sample keyed ``None``.
    Requested ``groups`` that have no rows map to empty arrays.
    """
    if group_col is None:
        values = pd.to_numeric(df[value_col], errors="coerce").to_numpy(dtype=float)
        return {None: values[np.isfinite(values)]}

    samples: Dict[object, np.ndarray] = {}
    for key, group in df.groupby(group_col, sort=False):
        values = pd.to_numeric(group[value_col], errors="coerce").to_numpy(dtype=float)
        samples[key] = values[np.isfinite(values)]
    if groups is not None:
        samples = {g: samples.get(g, np.array([], dtype=float)) for g in groups}
    return samples

