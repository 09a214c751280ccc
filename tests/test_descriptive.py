import math

import numpy as np
import pytest

from wqstats.errors import DegenerateSampleError, InsufficientSampleError
from wqstats.stats.descriptive import mean, std, variance


def test_mean_and_variance_simple():
    assert math.isclose(mean([1.0, 2.0, 3.0, 4.0]), 2.5)
    # sum of squared deviations 5.0 over n - 1 = 3
    assert math.isclose(variance([1.0, 2.0, 3.0, 4.0]), 5.0 / 3.0)
    assert math.isclose(std([1.0, 2.0, 3.0, 4.0]), math.sqrt(5.0 / 3.0))


def test_accepts_numpy_arrays(ph_sample):
    arr = np.array(ph_sample)
    assert math.isclose(mean(arr), 8.0)
    assert math.isclose(variance(arr), 0.00625)


def test_constant_sample_has_zero_variance():
    assert variance([4.2, 4.2, 4.2]) == 0.0


def test_mean_of_empty_sample_raises():
    with pytest.raises(InsufficientSampleError) as excinfo:
        mean([])
    assert excinfo.value.n == 0
    assert excinfo.value.min_required == 1


def test_variance_needs_two_observations():
    with pytest.raises(DegenerateSampleError) as excinfo:
        variance([3.0])
    assert excinfo.value.n == 1
    # degenerate samples are still insufficient samples for callers
    assert isinstance(excinfo.value, InsufficientSampleError)
    assert isinstance(excinfo.value, ValueError)
