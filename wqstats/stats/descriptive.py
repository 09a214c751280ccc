"""Sample mean and unbiased variance for one group of measurements."""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

from ..errors import DegenerateSampleError, InsufficientSampleError

SampleLike = Union[Sequence[float], np.ndarray]


def _as_array(sample: SampleLike) -> np.ndarray:
    return np.asarray(sample, dtype=float).ravel()


def mean(sample: SampleLike) -> float:
    """Return the arithmetic mean of ``sample``.

    Raises:
        InsufficientSampleError: If the sample is empty.
    """
    x = _as_array(sample)
    n = int(len(x))
    if n < 1:
        raise InsufficientSampleError(n, min_required=1)
    return float(np.sum(x) / n)


def variance(sample: SampleLike) -> float:
    """Return the unbiased sample variance (Bessel's correction).

    Args:
        sample: Measurements of one parameter, any unit.

    Returns:
        float: ``sum((x - mean)**2) / (n - 1)`` in squared sample units.

    Raises:
        DegenerateSampleError: If fewer than two observations are supplied,
            since the ``n - 1`` denominator would be zero.
    """
    x = _as_array(sample)
    n = int(len(x))
    if n < 2:
        raise DegenerateSampleError(n, min_required=2)
    m = float(np.sum(x) / n)
    return float(np.sum((x - m) ** 2) / (n - 1))


def std(sample: SampleLike) -> float:
    """Return the sample standard deviation, ``sqrt(variance(sample))``."""
    return math.sqrt(variance(sample))
