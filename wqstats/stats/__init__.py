"""
Numerical routines behind the t-tests.

This subpackage provides the leaf computations of the engine. All functions
operate on arrays and Python floats; no knowledge of thresholds, water bodies
or reporting is included.

Modules:
    descriptive:
        Sample mean and unbiased (n - 1) variance.

    special:
        Lanczos log-gamma with reflection for arguments below 0.5 and the
        regularized incomplete beta function via a Lentz continued fraction
        (fixed 200-iteration budget).

    distributions:
        Student's t CDF expressed through the incomplete beta function and
        its inverse via an 80-step bisection over [-15, 15].

    intervals:
        Confidence intervals for a mean and for a Welch mean difference.

Design Principle:
    This subpackage has no dependencies on the test, compliance, reporting
    or plotting modules. It can be tested independently.
"""

from .descriptive import mean, std, variance
from .distributions import inv_student_t, student_t_cdf
from .intervals import confidence_interval_diff, confidence_interval_mean
from .special import beta_frac, beta_inc, continued_fraction, log_gamma

__all__ = [
    "mean",
    "std",
    "variance",
    "log_gamma",
    "beta_inc",
    "beta_frac",
    "continued_fraction",
    "student_t_cdf",
    "inv_student_t",
    "confidence_interval_mean",
    "confidence_interval_diff",
]
