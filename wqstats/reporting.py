"""Format test results into tables and readable summaries.

This module is used after the numerical tests to present results
consistently in exported CSV artifacts and console output.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

import numpy as np
import pandas as pd

from .schema import TOST, TWO_SAMPLE_WELCH


@dataclass(frozen=True)
class ResultColumns:
    """Container for standardized column labels in exported tables.

    Attributes:
        test: Test discriminator (``one-sample``, ``two-sample-welch``,
            ``tost``).
        estimate: Point estimate: the sample mean, or the mean difference
            ``mean1 - mean2`` for Welch comparisons.
        ci: Confidence interval rendered as ``estimate ± half-width`` with
            the half-width rounded to one significant figure (two when its
            leading digit is 1).
        p_value: p-value rendered by :func:`format_p_value`. For TOST this is
            the larger of the two one-sided p-values.
        decision: ``significant`` / ``not significant`` or, for TOST,
            ``equivalent`` / ``not equivalent``.
    """

    test: str = "Test"
    estimate: str = "Estimate"
    ci: str = "Confidence Interval"
    ci_level: str = "CI Level"
    p_value: str = "p-value"
    decision: str = "Decision"


COLUMNS = ResultColumns()


def _round_half_width(half_width: float) -> tuple[float, int]:
    """Round a CI half-width to 1 s.f. (2 s.f. when the leading digit is 1).

    Returns:
        tuple[float, int]: Rounded half-width and the number of decimals used.
    """
    u = abs(float(half_width))
    if u == 0 or not math.isfinite(u):
        return u, 0

    exponent = math.floor(math.log10(u))
    leading = u / (10**exponent)
    sig_figs = 2 if 1.0 <= leading < 2.0 else 1
    ndigits = sig_figs - 1 - exponent
    return float(round(u, ndigits)), int(ndigits)


def format_p_value(p: float) -> str:
    """Return ``"< 0.001"`` for tiny p-values, else the value to 3 decimals."""
    p = float(p)
    if not np.isfinite(p):
        return ""
    if p < 0.001:
        return "< 0.001"
    return f"{p:.3f}"


def format_estimate_with_interval(estimate: float, ci_lower: float, ci_upper: float) -> str:
    """Format a point estimate with its symmetric CI half-width.

    The estimate is rounded to the decimal place of the rounded half-width,
    so ``8.0012`` with interval ``(7.8612, 8.1412)`` becomes ``"8.00 ± 0.14"``.
    """
    half = 0.5 * (float(ci_upper) - float(ci_lower))
    rounded, ndigits = _round_half_width(half)
    if rounded == 0 or not math.isfinite(rounded):
        return f"{estimate:.6g} ± {half:.6g}"
    if ndigits > 0:
        return f"{round(estimate, ndigits):.{ndigits}f} ± {rounded:.{ndigits}f}"
    return f"{round(estimate, ndigits):.0f} ± {rounded:.0f}"


def _estimate(record: Dict[str, Any]) -> float:
    if record.get("type") == TWO_SAMPLE_WELCH:
        return float(record["diff_mean"])
    return float(record["mean"])


def _overall_p(record: Dict[str, Any]) -> float:
    if record.get("type") == TOST:
        return max(float(record["p_lower"]), float(record["p_upper"]))
    return float(record["p_value"])


def _decision(record: Dict[str, Any]) -> str:
    if record.get("type") == TOST:
        return "equivalent" if record["equivalent"] else "not equivalent"
    return "significant" if record["significant"] else "not significant"


def results_dataframe(results: Iterable[Any]) -> pd.DataFrame:
    """Build one table row per result record.

    Args:
        results: Result records (anything with ``to_dict()``) or plain dicts.

    Returns:
        pandas.DataFrame: All result fields plus the display columns named in
        :class:`ResultColumns`.
    """
    rows: List[Dict[str, Any]] = []
    for res in results:
        record = res.to_dict() if hasattr(res, "to_dict") else dict(res)
        estimate = _estimate(record)
        row = dict(record)
        row[COLUMNS.test] = record.get("type")
        row[COLUMNS.estimate] = estimate
        row[COLUMNS.ci] = format_estimate_with_interval(
            estimate, record["ci_lower"], record["ci_upper"]
        )
        row[COLUMNS.ci_level] = f"{100.0 * float(record['ci_level']):.0f}%"
        row[COLUMNS.p_value] = format_p_value(_overall_p(record))
        row[COLUMNS.decision] = _decision(record)
        rows.append(row)
    return pd.DataFrame(rows)


def summary_lines(result: Any) -> List[str]:
    """Return a short human-readable summary of one result, line by line."""
    record = result.to_dict() if hasattr(result, "to_dict") else dict(result)
    kind = record.get("type")
    lines = [f"Test: {kind} (alpha = {record['alpha']:g})"]

    if kind == TWO_SAMPLE_WELCH:
        lines.append(
            f"Group 1: n = {record['n1']}, mean = {record['mean1']:.4g}, sd = {record['sd1']:.4g}"
        )
        lines.append(
            f"Group 2: n = {record['n2']}, mean = {record['mean2']:.4g}, sd = {record['sd2']:.4g}"
        )
        lines.append(
            f"t = {record['t']:.4f}, df = {record['df']:.2f}, "
            f"p = {format_p_value(record['p_value'])} ({record['alternative']})"
        )
    elif kind == TOST:
        lines.append(
            f"n = {record['n']}, mean = {record['mean']:.4g}, sd = {record['sd']:.4g}, "
            f"bounds = [{record['lower']:g}, {record['upper']:g}]"
        )
        lines.append(
            f"lower test: t = {record['t_lower']:.4f}, p = {format_p_value(record['p_lower'])}; "
            f"upper test: t = {record['t_upper']:.4f}, p = {format_p_value(record['p_upper'])}"
        )
    else:
        lines.append(
            f"n = {record['n']}, mean = {record['mean']:.4g}, sd = {record['sd']:.4g}, "
            f"mu0 = {record['mu0']:g}"
        )
        lines.append(
            f"t = {record['t']:.4f}, df = {record['df']:g}, "
            f"p = {format_p_value(record['p_value'])} ({record['alternative']})"
        )

    estimate = _estimate(record)
    lines.append(
        f"{100.0 * float(record['ci_level']):.0f}% CI: "
        f"[{record['ci_lower']:.4g}, {record['ci_upper']:.4g}] "
        f"({format_estimate_with_interval(estimate, record['ci_lower'], record['ci_upper'])})"
    )
    lines.append(f"Decision: {_decision(record)}")
    detail = record.get("interpretation_detail") or record.get("interpretation")
    if detail:
        lines.append(detail)
    return lines
