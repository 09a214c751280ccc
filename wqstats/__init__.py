"""
A Python package for statistical testing of water-quality measurements.

Determines whether a measured parameter differs from, or is equivalent to, a
regulatory threshold or another water body's measurements.

Modules:
    - stats: Descriptive statistics, special functions, Student's t distribution
      and confidence intervals.
    - ttest: One-sample, Welch two-sample and TOST equivalence tests.
    - compliance: Threshold evaluation, hypothesis-direction selection and
      interpretation text.
    - data_processing: Loads measurements from CSV and aggregates them into samples.
    - reporting / output / plotting: Result tables, CSV export and figures.
"""

__version__ = "1.0.0"

from .compliance import (
    auto_alternative,
    compare_groups,
    evaluate_threshold,
    interpret_one_sample,
    interpret_two_sample,
    resolve_evaluation_type,
)
from .data_processing import aggregate_measurements, extract_samples, load_measurements
from .errors import (
    ConfigurationError,
    DegenerateSampleError,
    DomainError,
    InsufficientSampleError,
    WqStatsError,
)
from .schema import OneSampleResult, TestConfiguration, TostResult, WelchResult
from .ttest import one_sample, p_value, run_test, tost, two_sample_welch

__all__ = [
    # Tests
    "one_sample",
    "two_sample_welch",
    "tost",
    "p_value",
    "run_test",
    # Records
    "TestConfiguration",
    "OneSampleResult",
    "WelchResult",
    "TostResult",
    # Compliance
    "evaluate_threshold",
    "compare_groups",
    "resolve_evaluation_type",
    "auto_alternative",
    "interpret_one_sample",
    "interpret_two_sample",
    # Data processing
    "load_measurements",
    "aggregate_measurements",
    "extract_samples",
    # Errors
    "WqStatsError",
    "InsufficientSampleError",
    "DegenerateSampleError",
    "DomainError",
    "ConfigurationError",
]
