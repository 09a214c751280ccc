"""Evaluate measurements against regulatory thresholds and interpret results.

This module sits between callers and :mod:`wqstats.ttest`. It decides which
test applies to a threshold (minimum, maximum or acceptable range), chooses
the hypothesis direction from the evaluation mode, enforces minimum sample
sizes and attaches plain-language interpretations.

Evaluation modes:
    compliance:
        Look for evidence of a violation (mean below a minimum or above a
        maximum).

    improvement:
        Look for evidence that the water body performs better than the
        threshold (mean above a minimum or below a maximum).
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import numpy as np

from .errors import ConfigurationError, InsufficientSampleError
from .schema import (
    DEFAULT_ALPHA,
    GREATER,
    LESS,
    TOST,
    TWO_SIDED,
    OneSampleResult,
    TostResult,
    WelchResult,
)
from .ttest import one_sample, tost, two_sample_welch

logger = logging.getLogger(__name__)

EVAL_MIN = "min"
EVAL_MAX = "max"
EVAL_RANGE = "range"
EVALUATION_TYPES = (EVAL_MIN, EVAL_MAX, EVAL_RANGE)

MODE_COMPLIANCE = "compliance"
MODE_IMPROVEMENT = "improvement"
MODES = (MODE_COMPLIANCE, MODE_IMPROVEMENT)

DEFAULT_MIN_N = 3
WARN_LOW_N = 6


@dataclass(frozen=True)
class ComplianceReport:
    """Outcome of testing one sample against its threshold(s).

    Attributes:
        result: Underlying one-sample or TOST result.
        evaluation_type: ``min``, ``max`` or ``range`` as actually applied.
        mode: ``compliance`` or ``improvement``.
        threshold_min: Minimum threshold, if any.
        threshold_max: Maximum threshold, if any.
        sample_n: Number of observations tested.
        warn_low_n: ``True`` when ``sample_n < WARN_LOW_N``.
        interpretation_detail: Plain-language reading of the result.
    """

    result: Union[OneSampleResult, TostResult]
    evaluation_type: Optional[str]
    mode: str
    threshold_min: Optional[float]
    threshold_max: Optional[float]
    sample_n: int
    warn_low_n: bool
    interpretation_detail: str

    def to_dict(self) -> Dict[str, Any]:
        out = self.result.to_dict()
        out.update(
            {
                "sample_n": self.sample_n,
                "warn_low_n": self.warn_low_n,
                "mode": self.mode,
                "evaluation_type": self.evaluation_type,
                "threshold_min": self.threshold_min,
                "threshold_max": self.threshold_max,
                "interpretation_detail": self.interpretation_detail,
            }
        )
        return out


@dataclass(frozen=True)
class ComparisonReport:
    """Outcome of a Welch comparison between two groups."""

    result: WelchResult
    sample1_n: int
    sample2_n: int
    warn_low_n: bool
    interpretation_detail: str

    def to_dict(self) -> Dict[str, Any]:
        out = self.result.to_dict()
        out.update(
            {
                "sample1_n": self.sample1_n,
                "sample2_n": self.sample2_n,
                "warn_low_n": self.warn_low_n,
                "interpretation_detail": self.interpretation_detail,
            }
        )
        return out


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    v = float(value)
    return None if math.isnan(v) else v


def resolve_evaluation_type(
    threshold_min: Optional[float],
    threshold_max: Optional[float],
    requested: Optional[str] = None,
) -> Optional[str]:
    """Decide how a sample is judged against the available thresholds.

    Without a request the type follows from which thresholds exist: both give
    ``range``, one side gives ``min`` or ``max``, none gives ``None``. A
    requested ``min`` with only a maximum available flips to ``max`` and vice
    versa.
    """
    if requested is not None and requested not in EVALUATION_TYPES:
        raise ConfigurationError(
            f"evaluation_type must be one of {EVALUATION_TYPES}, got {requested!r}"
        )
    if requested is None:
        if threshold_min is not None and threshold_max is not None:
            return EVAL_RANGE
        if threshold_min is not None:
            return EVAL_MIN
        if threshold_max is not None:
            return EVAL_MAX
        return None
    if requested == EVAL_MIN and threshold_min is None and threshold_max is not None:
        return EVAL_MAX
    if requested == EVAL_MAX and threshold_max is None and threshold_min is not None:
        return EVAL_MIN
    return requested


def auto_alternative(evaluation_type: Optional[str], mode: str = MODE_COMPLIANCE) -> str:
    """Return the alternative hypothesis implied by evaluation type and mode."""
    if mode not in MODES:
        raise ConfigurationError(f"mode must be one of {MODES}, got {mode!r}")
    if evaluation_type == EVAL_MIN:
        return LESS if mode == MODE_COMPLIANCE else GREATER
    if evaluation_type == EVAL_MAX:
        return GREATER if mode == MODE_COMPLIANCE else LESS
    return TWO_SIDED


def _finite_values(sample: Any) -> np.ndarray:
    x = np.asarray(sample, dtype=float).ravel()
    return x[np.isfinite(x)]


def _warn_low_n(n: int, where: str) -> bool:
    if n < WARN_LOW_N:
        warnings.warn(
            f"Only {n} observations in {where}; results below {WARN_LOW_N} "
            f"observations should be read with caution.",
            UserWarning,
            stacklevel=3,
        )
        return True
    return False


def evaluate_threshold(
    sample: Any,
    threshold_min: Optional[float] = None,
    threshold_max: Optional[float] = None,
    alpha: float = DEFAULT_ALPHA,
    mode: str = MODE_COMPLIANCE,
    evaluation_type: Optional[str] = None,
    manual_mu0: Optional[float] = None,
    min_n: int = DEFAULT_MIN_N,
) -> ComplianceReport:
    """Test a sample against a minimum, maximum or acceptable range.

    Args:
        sample: Measurements; non-finite entries are dropped.
        threshold_min (float, optional): Minimum acceptable value.
        threshold_max (float, optional): Maximum acceptable value.
        alpha (float, optional): Significance level. Defaults to 0.05.
        mode (str, optional): ``compliance`` or ``improvement``.
        evaluation_type (str, optional): Override of the derived type.
        manual_mu0 (float, optional): Comparison value overriding the
            threshold for ``min``/``max`` evaluations.
        min_n (int, optional): Minimum number of observations. Defaults to
            ``DEFAULT_MIN_N``.

    Returns:
        ComplianceReport: TOST for ``range``, otherwise a one-sample test whose
        alternative follows :func:`auto_alternative`.

    Raises:
        InsufficientSampleError: If fewer than ``min_n`` finite observations
            remain.
        ConfigurationError: If a range lacks a bound or no comparison value
            can be found.
    """
    threshold_min = _optional_float(threshold_min)
    threshold_max = _optional_float(threshold_max)
    manual_mu0 = _optional_float(manual_mu0)
    if mode not in MODES:
        raise ConfigurationError(f"mode must be one of {MODES}, got {mode!r}")

    x = _finite_values(sample)
    n = int(len(x))
    if n < max(int(min_n), 2):
        raise InsufficientSampleError(n, min_required=max(int(min_n), 2))

    eval_type = resolve_evaluation_type(threshold_min, threshold_max, evaluation_type)
    warn = _warn_low_n(n, "sample")

    if eval_type == EVAL_RANGE:
        if threshold_min is None or threshold_max is None:
            raise ConfigurationError("Range evaluation requires both min and max")
        result = tost(x, threshold_min, threshold_max, alpha)
    else:
        mu0 = threshold_min if eval_type == EVAL_MIN else threshold_max
        if manual_mu0 is not None:
            mu0 = manual_mu0
        if mu0 is None:
            raise ConfigurationError(
                "No threshold value available and none supplied via manual_mu0"
            )
        alternative = auto_alternative(eval_type, mode)
        result = one_sample(x, mu0, alpha, alternative)

    logger.info(
        "Threshold evaluation: type=%s mode=%s n=%d significant=%s",
        eval_type, mode, n, result.significant,
    )
    return ComplianceReport(
        result=result,
        evaluation_type=eval_type,
        mode=mode,
        threshold_min=threshold_min,
        threshold_max=threshold_max,
        sample_n=n,
        warn_low_n=warn,
        interpretation_detail=interpret_one_sample(result, eval_type, mode),
    )


def compare_groups(
    sample1: Any,
    sample2: Any,
    alpha: float = DEFAULT_ALPHA,
    min_n: int = DEFAULT_MIN_N,
    higher_is_worse: Optional[bool] = None,
    alternative: str = TWO_SIDED,
) -> ComparisonReport:
    """Run a Welch test between two groups after a minimum-size check.

    The comparison is two-sided unless ``alternative`` names a direction
    (``greater`` tests ``mean1 > mean2``).
    """
    x1 = _finite_values(sample1)
    x2 = _finite_values(sample2)
    required = max(int(min_n), 2)
    if len(x1) < required:
        raise InsufficientSampleError(len(x1), min_required=required, group="sample1")
    if len(x2) < required:
        raise InsufficientSampleError(len(x2), min_required=required, group="sample2")

    warn1 = _warn_low_n(len(x1), "sample1")
    warn2 = _warn_low_n(len(x2), "sample2")
    result = two_sample_welch(x1, x2, alpha, alternative)
    logger.info(
        "Group comparison: n1=%d n2=%d significant=%s", len(x1), len(x2), result.significant
    )
    return ComparisonReport(
        result=result,
        sample1_n=int(len(x1)),
        sample2_n=int(len(x2)),
        warn_low_n=warn1 or warn2,
        interpretation_detail=interpret_two_sample(result, higher_is_worse),
    )


def interpret_one_sample(
    result: Union[OneSampleResult, TostResult],
    evaluation_type: Optional[str],
    mode: str = MODE_COMPLIANCE,
) -> str:
    """Return a one-sentence reading of a threshold test."""
    if result.type == TOST:
        if result.equivalent:
            return "Mean parameter level statistically within the acceptable regulatory range."
        return "Unable to confirm the mean lies fully inside the required range."

    sig = result.significant
    alt = result.alternative
    if evaluation_type == EVAL_MIN:
        if mode == MODE_COMPLIANCE and alt == LESS:
            if sig:
                return "Mean is statistically BELOW the minimum threshold (potential non-compliance)."
            return "No statistical evidence the mean is below the minimum; compliance not disproven."
        if mode == MODE_IMPROVEMENT and alt == GREATER:
            if sig:
                return "Mean is significantly ABOVE the minimum (improvement demonstrated)."
            return "Insufficient evidence that mean exceeds the minimum."
    elif evaluation_type == EVAL_MAX:
        if mode == MODE_COMPLIANCE and alt == GREATER:
            if sig:
                return "Mean exceeds the maximum limit (potential non-compliance)."
            return "No statistical evidence that mean exceeds the maximum; compliance not disproven."
        if mode == MODE_IMPROVEMENT and alt == LESS:
            if sig:
                return "Mean is significantly BELOW the maximum (good performance)."
            return "Insufficient evidence that mean is below the maximum."
    return "Statistical difference detected." if sig else "No statistical difference detected."


def interpret_two_sample(result: WelchResult, higher_is_worse: Optional[bool] = None) -> str:
    """Return a reading of a Welch comparison, naming the higher group.

    When ``higher_is_worse`` is known and the difference is significant, a
    second sentence names the group with the more favourable level.
    """
    if not result.significant:
        return "No significant difference between the two group means."
    first_higher = result.mean1 > result.mean2
    direction = "first group higher" if first_higher else "second group higher"
    text = f"Significant difference between groups ({direction})."
    if higher_is_worse is not None and result.mean1 != result.mean2:
        favourable_first = first_higher != bool(higher_is_worse)
        favourable = "first group" if favourable_first else "second group"
        text += (
            f" Based on this parameter alone, the {favourable} shows the more "
            f"favorable level."
        )
    return text
