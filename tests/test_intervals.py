import math

import pytest

from wqstats.errors import ConfigurationError, InsufficientSampleError
from wqstats.stats.distributions import inv_student_t
from wqstats.stats.intervals import confidence_interval_diff, confidence_interval_mean

T_975_DF4 = 2.7764451051977934


def test_two_sided_interval_for_mean():
    sd = math.sqrt(0.00625)
    lo, hi = confidence_interval_mean(8.0, sd, 5, 0.05)
    half = T_975_DF4 * sd / math.sqrt(5)
    assert math.isclose(lo, 8.0 - half, abs_tol=1e-6)
    assert math.isclose(hi, 8.0 + half, abs_tol=1e-6)
    assert math.isclose(8.0 - lo, hi - 8.0, rel_tol=1e-12)


def test_one_sided_interval_is_narrower():
    two = confidence_interval_mean(10.0, 2.0, 12, 0.05, "two-sided")
    one = confidence_interval_mean(10.0, 2.0, 12, 0.05, "one-sided")
    assert (one[1] - one[0]) < (two[1] - two[0])
    half = inv_student_t(0.95, 11) * 2.0 / math.sqrt(12)
    assert math.isclose(one[1], 10.0 + half, rel_tol=1e-12)


def test_zero_sd_gives_point_interval():
    assert confidence_interval_mean(3.0, 0.0, 4, 0.05) == (3.0, 3.0)


def test_interval_needs_two_observations():
    with pytest.raises(InsufficientSampleError):
        confidence_interval_mean(1.0, 0.5, 1, 0.05)


def test_interval_rejects_unknown_side():
    with pytest.raises(ConfigurationError):
        confidence_interval_mean(1.0, 0.5, 5, 0.05, "upper")


def test_difference_interval_is_centred_on_difference():
    lo, hi = confidence_interval_diff(11.5, 5.75, 5.0 / 3.0, 2.75 / 3.0, 4, 4, 0.05, 5.5336)
    assert math.isclose((lo + hi) / 2.0, 5.75, rel_tol=1e-12)
    se = math.sqrt(31.0 / 48.0)
    assert math.isclose(hi - 5.75, inv_student_t(0.975, 5.5336) * se, rel_tol=1e-12)
    assert lo > 0
