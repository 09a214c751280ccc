"""Confidence intervals for a mean and for a difference of means."""

from __future__ import annotations

import math
from typing import Tuple

from ..errors import ConfigurationError, InsufficientSampleError
from .distributions import inv_student_t

SIDES = ("two-sided", "one-sided")


def confidence_interval_mean(
    mean: float, sd: float, n: int, alpha: float, side: str = "two-sided"
) -> Tuple[float, float]:
    """Return a ``(1 - alpha)`` confidence interval for a population mean.

    Args:
        mean (float): Sample mean.
        sd (float): Sample standard deviation (same unit as ``mean``).
        n (int): Number of observations; ``df = n - 1``.
        alpha (float): Significance level in ``(0, 1)``.
        side (str, optional): ``"two-sided"`` uses the ``1 - alpha/2``
            quantile; ``"one-sided"`` uses the ``1 - alpha`` quantile.
            Defaults to ``"two-sided"``.

    Returns:
        tuple[float, float]: ``(lower, upper)`` bounds, symmetric about ``mean``.

    Raises:
        InsufficientSampleError: If ``n < 2``.
        ConfigurationError: If ``side`` is not recognised.
    """
    if n < 2:
        raise InsufficientSampleError(n)
    if side not in SIDES:
        raise ConfigurationError(f"side must be one of {SIDES}, got {side!r}")
    df = n - 1
    se = sd / math.sqrt(n)
    prob = 1.0 - alpha / 2.0 if side == "two-sided" else 1.0 - alpha
    t_crit = inv_student_t(prob, df)
    return mean - t_crit * se, mean + t_crit * se


def confidence_interval_diff(
    m1: float,
    m2: float,
    v1: float,
    v2: float,
    n1: int,
    n2: int,
    alpha: float,
    df: float,
) -> Tuple[float, float]:
    """Return a two-sided ``(1 - alpha)`` interval for ``m1 - m2`` (Welch)."""
    diff = m1 - m2
    se = math.sqrt(v1 / n1 + v2 / n2)
    t_crit = inv_student_t(1.0 - alpha / 2.0, df)
    return diff - t_crit * se, diff + t_crit * se
