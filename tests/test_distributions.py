import math

import pytest

from wqstats.errors import DomainError
from wqstats.stats.distributions import (
    BISECTION_LOWER,
    BISECTION_UPPER,
    inv_student_t,
    student_t_cdf,
)


def test_cdf_at_zero_is_half():
    for df in (1, 2, 3.7, 30, 500):
        assert math.isclose(student_t_cdf(0.0, df), 0.5, abs_tol=1e-12)


def test_cdf_cauchy_closed_form():
    # df = 1 is the Cauchy distribution
    for t in (-8.0, -2.0, -0.3, 0.5, 1.0, 4.0):
        expected = 0.5 + math.atan(t) / math.pi
        assert math.isclose(student_t_cdf(t, 1), expected, abs_tol=1e-10)


def test_cdf_two_df_closed_form():
    for t in (-3.0, -1.0, 0.25, 1.5, 6.0):
        expected = 0.5 + t / (2.0 * math.sqrt(2.0 + t * t))
        assert math.isclose(student_t_cdf(t, 2), expected, abs_tol=1e-10)


def test_cdf_symmetry_and_monotonicity():
    ts = [-6.0, -2.5, -1.0, -0.1, 0.0, 0.1, 1.0, 2.5, 6.0]
    for df in (1, 4, 5.53, 40):
        for t in ts:
            assert math.isclose(student_t_cdf(-t, df), 1.0 - student_t_cdf(t, df), abs_tol=1e-10)
        values = [student_t_cdf(t, df) for t in ts]
        assert all(b > a for a, b in zip(values, values[1:]))


def test_cdf_infinite_statistic():
    assert student_t_cdf(math.inf, 3) == 1.0
    assert student_t_cdf(-math.inf, 3) == 0.0


@pytest.mark.parametrize("df", [0, -1.0, float("inf"), float("nan")])
def test_cdf_rejects_bad_df(df):
    with pytest.raises(DomainError):
        student_t_cdf(1.0, df)


def test_cdf_rejects_nan_statistic():
    with pytest.raises(DomainError):
        student_t_cdf(float("nan"), 5)


@pytest.mark.parametrize(
    "df, expected",
    [
        (1, 12.706204736174707),
        (2, 4.302652729749464),
        (4, 2.7764451051977934),
    ],
)
def test_inverse_critical_values(df, expected):
    assert math.isclose(inv_student_t(0.975, df), expected, abs_tol=1e-6)
    assert math.isclose(inv_student_t(0.025, df), -expected, abs_tol=1e-6)


def test_inverse_median_is_zero():
    # the CDF is flat at exactly 0.5 for |t| below about 2e-8
    assert abs(inv_student_t(0.5, 7)) < 1e-6


@pytest.mark.parametrize("df", [1, 5, 30, 120])
def test_inverse_round_trip(df):
    for t in (-10.0, -5.0, -2.0, -0.5, 0.0, 0.5, 2.0, 5.0, 10.0):
        if t <= 0:
            assert math.isclose(inv_student_t(student_t_cdf(t, df), df), t, abs_tol=1e-6)
        else:
            # upper tail probabilities round towards 1; go through the mirror
            assert math.isclose(-inv_student_t(student_t_cdf(-t, df), df), t, abs_tol=1e-6)


def test_inverse_of_saturated_cdf_returns_bracket_edge():
    p = student_t_cdf(10.0, 120)
    assert p == 1.0
    assert inv_student_t(p, 120) == BISECTION_UPPER
    assert inv_student_t(0.0, 5) == BISECTION_LOWER
    assert inv_student_t(1.0, 5) == BISECTION_UPPER


def test_inverse_is_clamped_to_bracket():
    # true quantile is far below -15 for the Cauchy case
    assert math.isclose(inv_student_t(1e-12, 1), BISECTION_LOWER, abs_tol=1e-9)


@pytest.mark.parametrize("prob", [-0.2, 1.5, -1e-12, float("nan")])
def test_inverse_rejects_probabilities_outside_unit_interval(prob):
    with pytest.raises(DomainError):
        inv_student_t(prob, 5)


def test_against_scipy_reference():
    stats = pytest.importorskip("scipy.stats")
    for df in (1, 2.5, 5.5336, 30):
        for t in (-4.0, -1.0, 0.3, 2.7):
            assert math.isclose(student_t_cdf(t, df), stats.t.cdf(t, df), abs_tol=1e-9)
        for prob in (0.05, 0.9, 0.975):
            assert math.isclose(inv_student_t(prob, df), stats.t.ppf(prob, df), abs_tol=1e-6)
