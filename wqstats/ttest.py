"""
One-sample, Welch two-sample and TOST equivalence t-tests.

Each test takes raw samples and returns an immutable result record from
:mod:`wqstats.schema`. The pipeline is always the same:
- descriptive statistics (mean, unbiased variance),
- test statistic and degrees of freedom,
- p-value through the Student's t CDF,
- decision at ``alpha`` and a confidence interval.

The functions are pure and keep no state between calls.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Union

import numpy as np

from .errors import ConfigurationError, DegenerateSampleError, DomainError, InsufficientSampleError
from .schema import (
    GREATER,
    LESS,
    ONE_SAMPLE,
    TOST,
    TWO_SAMPLE_WELCH,
    TWO_SIDED,
    OneSampleResult,
    TestConfiguration,
    TostResult,
    WelchResult,
    validate_alpha,
    validate_alternative,
)
from .stats.descriptive import mean as sample_mean
from .stats.descriptive import variance as sample_variance
from .stats.distributions import student_t_cdf
from .stats.intervals import confidence_interval_diff, confidence_interval_mean

logger = logging.getLogger(__name__)

TOST_EQUIVALENT_TEXT = "Mean within acceptable range (equivalent)"
TOST_NOT_EQUIVALENT_TEXT = "Insufficient evidence that mean lies strictly within range"


def _prepare_sample(sample: Any, label: str = "sample") -> np.ndarray:
    x = np.asarray(sample, dtype=float).ravel()
    if not np.all(np.isfinite(x)):
        raise DomainError(f"{label} contains non-finite values")
    if len(x) < 2:
        raise InsufficientSampleError(len(x), min_required=2, group=label)
    return x


def _t_statistic(diff: float, se: float) -> float:
    # Constant samples have se == 0; keep the direction of the difference.
    if se > 0:
        return diff / se
    if diff == 0:
        return 0.0
    return math.copysign(math.inf, diff)


def p_value(t: float, df: float, alternative: str = TWO_SIDED) -> float:
    """Return the p-value of statistic ``t`` under the chosen alternative.

    Args:
        t (float): Observed t statistic.
        df (float): Degrees of freedom.
        alternative (str): ``"greater"`` (upper tail), ``"less"`` (lower
            tail) or ``"two-sided"`` (twice the smaller tail).

    Returns:
        float: Probability in ``[0, 1]``.

    Raises:
        ConfigurationError: If ``alternative`` is not recognised.
    """
    validate_alternative(alternative)
    cdf = student_t_cdf(t, df)
    if alternative == GREATER:
        return 1.0 - cdf
    if alternative == LESS:
        return cdf
    tail = 1.0 - cdf if t > 0 else cdf
    return 2.0 * tail


def one_sample(
    sample: Any, mu0: float, alpha: float, alternative: str = TWO_SIDED
) -> OneSampleResult:
    """Test whether the population mean differs from ``mu0``.

    Args:
        sample: Finite measurements, at least two.
        mu0 (float): Comparison value (for example a regulatory threshold).
        alpha (float): Significance level in ``(0, 1)``.
        alternative (str, optional): Direction of H1. Defaults to
            ``"two-sided"``.

    Returns:
        OneSampleResult: Statistics, decision and a two-sided ``(1 - alpha)``
        confidence interval for the mean. The interval is two-sided whatever
        the alternative.

    Raises:
        InsufficientSampleError: If fewer than two observations are supplied.
        DomainError: If the sample contains NaN or infinite values.
        ConfigurationError: If ``alpha`` or ``alternative`` is invalid.
    """
    alpha = validate_alpha(alpha)
    validate_alternative(alternative)
    x = _prepare_sample(sample)
    n = int(len(x))

    m = sample_mean(x)
    sd = math.sqrt(sample_variance(x))
    t = _t_statistic(m - float(mu0), sd / math.sqrt(n))
    df = n - 1
    p = p_value(t, df, alternative)
    ci_lower, ci_upper = confidence_interval_mean(m, sd, n, alpha, TWO_SIDED)

    logger.debug(
        "one-sample t-test: n=%d mean=%.6g sd=%.6g mu0=%.6g t=%.6g df=%d p=%.6g",
        n, m, sd, mu0, t, df, p,
    )
    return OneSampleResult(
        mean=m,
        sd=sd,
        n=n,
        mu0=float(mu0),
        t=t,
        df=df,
        p_value=p,
        alpha=alpha,
        significant=p < alpha,
        alternative=alternative,
        ci_level=1.0 - alpha,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
    )


def welch_df(v1: float, n1: int, v2: float, n2: int) -> float:
    """Return the Welch–Satterthwaite degrees of freedom.

    Raises:
        DegenerateSampleError: If both group variances are zero (df is 0/0).
    """
    a = v1 / n1
    b = v2 / n2
    denom = (v1 * v1) / (n1 * n1 * (n1 - 1)) + (v2 * v2) / (n2 * n2 * (n2 - 1))
    if denom == 0:
        raise DegenerateSampleError(
            min(n1, n2),
            message="Both groups have zero variance; Welch degrees of freedom are undefined.",
        )
    return (a + b) ** 2 / denom


def two_sample_welch(
    sample1: Any, sample2: Any, alpha: float, alternative: str = TWO_SIDED
) -> WelchResult:
    """Compare two group means without assuming equal variances.

    The confidence interval for ``mean1 - mean2`` uses the same
    Welch–Satterthwaite degrees of freedom as the test.

    Raises:
        InsufficientSampleError: If either group has fewer than two observations.
        DegenerateSampleError: If both groups are constant.
    """
    alpha = validate_alpha(alpha)
    validate_alternative(alternative)
    x1 = _prepare_sample(sample1, "sample1")
    x2 = _prepare_sample(sample2, "sample2")
    n1 = int(len(x1))
    n2 = int(len(x2))

    m1 = sample_mean(x1)
    m2 = sample_mean(x2)
    v1 = sample_variance(x1)
    v2 = sample_variance(x2)
    se = math.sqrt(v1 / n1 + v2 / n2)
    df = welch_df(v1, n1, v2, n2)
    t = _t_statistic(m1 - m2, se)
    p = p_value(t, df, alternative)
    ci_lower, ci_upper = confidence_interval_diff(m1, m2, v1, v2, n1, n2, alpha, df)

    logger.debug(
        "Welch t-test: n1=%d n2=%d diff=%.6g t=%.6g df=%.4f p=%.6g",
        n1, n2, m1 - m2, t, df, p,
    )
    return WelchResult(
        mean1=m1,
        mean2=m2,
        sd1=math.sqrt(v1),
        sd2=math.sqrt(v2),
        n1=n1,
        n2=n2,
        t=t,
        df=df,
        p_value=p,
        alpha=alpha,
        significant=p < alpha,
        alternative=alternative,
        diff_mean=m1 - m2,
        ci_level=1.0 - alpha,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
    )


def tost(sample: Any, lower: float, upper: float, alpha: float) -> TostResult:
    """Two one-sided tests for equivalence of the mean with ``[lower, upper]``.

    The lower test rejects H0: mean <= lower when the mean lies clearly above
    ``lower``; the upper test rejects H0: mean >= upper when the mean lies
    clearly below ``upper``. Equivalence is declared only if both reject at
    ``alpha``.

    Args:
        sample: Finite measurements, at least two.
        lower (float): Lower equivalence bound.
        upper (float): Upper equivalence bound, ``upper > lower``.
        alpha (float): Level of each one-sided test.

    Returns:
        TostResult: Both one-sided statistics and p-values, the equivalence
        decision and a ``(1 - 2*alpha)`` confidence interval, the interval
        whose containment in ``[lower, upper]`` matches the dual-test
        decision.

    Raises:
        InsufficientSampleError: If fewer than two observations are supplied.
        ConfigurationError: If ``lower >= upper`` or ``alpha`` is invalid.
    """
    alpha = validate_alpha(alpha)
    lower = float(lower)
    upper = float(upper)
    if not lower < upper:
        raise ConfigurationError(
            f"Equivalence bounds require lower < upper, got [{lower}, {upper}]"
        )
    x = _prepare_sample(sample)
    n = int(len(x))

    m = sample_mean(x)
    sd = math.sqrt(sample_variance(x))
    se = sd / math.sqrt(n)
    df = n - 1

    t_lower = _t_statistic(m - lower, se)
    p_lower = p_value(t_lower, df, GREATER)
    t_upper = _t_statistic(m - upper, se)
    p_upper = p_value(t_upper, df, LESS)
    equivalent = (p_lower < alpha) and (p_upper < alpha)

    ci_alpha = 2.0 * alpha
    if ci_alpha < 1.0:
        ci_lower, ci_upper = confidence_interval_mean(m, sd, n, ci_alpha, TWO_SIDED)
    else:
        # A (1 - 2*alpha) interval has no width once alpha reaches 0.5.
        ci_lower, ci_upper = m, m

    logger.debug(
        "TOST: n=%d mean=%.6g bounds=[%.6g, %.6g] p_lower=%.6g p_upper=%.6g equivalent=%s",
        n, m, lower, upper, p_lower, p_upper, equivalent,
    )
    return TostResult(
        mean=m,
        sd=sd,
        n=n,
        lower=lower,
        upper=upper,
        t_lower=t_lower,
        t_upper=t_upper,
        p_lower=p_lower,
        p_upper=p_upper,
        df=df,
        alpha=alpha,
        equivalent=equivalent,
        significant=equivalent,
        ci_level=max(0.0, 1.0 - ci_alpha),
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        interpretation=TOST_EQUIVALENT_TEXT if equivalent else TOST_NOT_EQUIVALENT_TEXT,
    )


def run_test(
    config: Union[TestConfiguration, Mapping[str, Any]]
) -> Union[OneSampleResult, WelchResult, TostResult]:
    """Run the test described by ``config`` (a configuration or plain mapping)."""
    if not isinstance(config, TestConfiguration):
        config = TestConfiguration.from_mapping(config)

    if config.test == ONE_SAMPLE:
        return one_sample(config.sample, config.mu0, config.alpha, config.alternative)
    if config.test == TWO_SAMPLE_WELCH:
        return two_sample_welch(config.sample, config.sample2, config.alpha, config.alternative)
    if config.test == TOST:
        return tost(config.sample, config.lower, config.upper, config.alpha)
    raise ConfigurationError(f"Unknown test type {config.test!r}")
