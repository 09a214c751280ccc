"""Student's t distribution: CDF and inverse CDF."""

from __future__ import annotations

import math

from ..errors import DomainError
from .special import beta_inc

BISECTION_LOWER = -15.0
BISECTION_UPPER = 15.0
BISECTION_ITERATIONS = 80


def _check_df(df: float) -> float:
    df = float(df)
    if not math.isfinite(df) or df <= 0:
        raise DomainError(f"Degrees of freedom must be positive and finite, got {df!r}")
    return df


def student_t_cdf(t: float, df: float) -> float:
    """Return ``P(T <= t)`` for a Student's t variable with ``df`` degrees of freedom.

    Args:
        t (float): Test statistic. ``+inf``/``-inf`` map to 1 and 0.
        df (float): Degrees of freedom; real-valued df (Welch) is allowed.

    Returns:
        float: Cumulative probability in ``[0, 1]``.

    Raises:
        DomainError: If ``df`` is not positive and finite or ``t`` is NaN.

    Note:
        With ``x = df / (df + t**2)``, ``I_x(df/2, 1/2)`` is the two-tailed
        probability ``P(|T| >= |t|)``; half of it is one tail.

    References:
        Abramowitz & Stegun, eq. 26.7.1.
    """
    df = _check_df(df)
    t = float(t)
    if math.isnan(t):
        raise DomainError("Student's t CDF is undefined for t=nan")
    x = df / (df + t * t)
    p = 0.5 * beta_inc(x, df / 2.0, 0.5)
    return 1.0 - p if t > 0 else p


def inv_student_t(prob: float, df: float) -> float:
    """Return ``t`` such that ``student_t_cdf(t, df) ~= prob``.

    Bisection over ``[-15, 15]`` with a fixed budget of
    ``BISECTION_ITERATIONS`` halvings; the midpoint of the final bracket is
    returned. Quantiles beyond the bracket are clamped to its edges, and the
    saturated probabilities ``0`` and ``1`` (which ``student_t_cdf`` returns
    for large ``|t|``) map straight to the bracket edges.

    Raises:
        DomainError: If ``prob`` is NaN or outside ``[0, 1]``, or ``df`` is
            not positive and finite.
    """
    prob = float(prob)
    if math.isnan(prob) or prob < 0.0 or prob > 1.0:
        raise DomainError(f"Probability must lie in [0, 1], got {prob!r}")
    df = _check_df(df)
    if prob <= 0.0:
        return BISECTION_LOWER
    if prob >= 1.0:
        return BISECTION_UPPER

    lo = BISECTION_LOWER
    hi = BISECTION_UPPER
    for _ in range(BISECTION_ITERATIONS):
        mid = (lo + hi) / 2.0
        if student_t_cdf(mid, df) < prob:
            lo = mid
        else:
            hi = mid
    return (lo + hi) / 2.0
