"""Tests for threshold evaluation, group comparison and interpretations."""

import warnings

import numpy as np
import pytest

from wqstats.compliance import (
    EVAL_MAX,
    EVAL_MIN,
    EVAL_RANGE,
    auto_alternative,
    compare_groups,
    evaluate_threshold,
    interpret_one_sample,
    interpret_two_sample,
    resolve_evaluation_type,
)
from wqstats.errors import ConfigurationError, InsufficientSampleError
from wqstats.ttest import one_sample, two_sample_welch

LOW_DO = [3.0, 3.2, 2.9, 3.1, 3.0, 3.1]


def test_resolve_evaluation_type():
    assert resolve_evaluation_type(5.0, 9.0) == EVAL_RANGE
    assert resolve_evaluation_type(5.0, None) == EVAL_MIN
    assert resolve_evaluation_type(None, 9.0) == EVAL_MAX
    assert resolve_evaluation_type(None, None) is None
    # a requested side flips to the one that exists
    assert resolve_evaluation_type(None, 9.0, "min") == EVAL_MAX
    assert resolve_evaluation_type(5.0, None, "max") == EVAL_MIN
    assert resolve_evaluation_type(5.0, 9.0, "max") == EVAL_MAX
    with pytest.raises(ConfigurationError):
        resolve_evaluation_type(5.0, 9.0, "median")


@pytest.mark.parametrize(
    "eval_type, mode, expected",
    [
        ("min", "compliance", "less"),
        ("min", "improvement", "greater"),
        ("max", "compliance", "greater"),
        ("max", "improvement", "less"),
        ("range", "compliance", "two-sided"),
        (None, "improvement", "two-sided"),
    ],
)
def test_auto_alternative(eval_type, mode, expected):
    assert auto_alternative(eval_type, mode) == expected


def test_auto_alternative_rejects_unknown_mode():
    with pytest.raises(ConfigurationError):
        auto_alternative("min", "audit")


def test_minimum_violation_in_compliance_mode():
    report = evaluate_threshold(LOW_DO, threshold_min=5.0)
    assert report.evaluation_type == EVAL_MIN
    assert report.result.alternative == "less"
    assert report.result.mu0 == 5.0
    assert report.result.significant
    assert report.sample_n == 6
    assert not report.warn_low_n
    assert "BELOW the minimum" in report.interpretation_detail


def test_minimum_in_improvement_mode_is_not_demonstrated():
    report = evaluate_threshold(LOW_DO, threshold_min=5.0, mode="improvement")
    assert report.result.alternative == "greater"
    assert not report.result.significant
    assert report.interpretation_detail == "Insufficient evidence that mean exceeds the minimum."


def test_maximum_exceedance():
    sample = [52.0, 55.0, 58.0, 54.0, 56.0, 57.0]
    report = evaluate_threshold(sample, threshold_max=50.0)
    assert report.evaluation_type == EVAL_MAX
    assert report.result.alternative == "greater"
    assert report.result.significant
    assert "exceeds the maximum" in report.interpretation_detail


def test_range_runs_tost():
    sample = [7.1, 7.3, 7.0, 7.2, 7.4, 7.2]
    report = evaluate_threshold(sample, threshold_min=6.5, threshold_max=8.5)
    assert report.evaluation_type == EVAL_RANGE
    assert report.result.type == "tost"
    assert report.result.equivalent
    assert report.interpretation_detail.startswith("Mean parameter level statistically within")


def test_range_requested_without_both_bounds():
    with pytest.raises(ConfigurationError):
        evaluate_threshold(LOW_DO, threshold_min=5.0, evaluation_type="range")


def test_requested_side_flips_to_available_threshold():
    report = evaluate_threshold(LOW_DO, threshold_max=5.0, evaluation_type="min")
    assert report.evaluation_type == EVAL_MAX
    assert report.result.mu0 == 5.0


def test_manual_mu0_overrides_threshold_and_is_required_without_one():
    report = evaluate_threshold(LOW_DO, threshold_min=5.0, manual_mu0=3.0)
    assert report.result.mu0 == 3.0

    report = evaluate_threshold(LOW_DO, manual_mu0=3.05)
    assert report.evaluation_type is None
    assert report.result.alternative == "two-sided"
    assert not report.result.significant
    assert report.interpretation_detail == "No statistical difference detected."

    with pytest.raises(ConfigurationError):
        evaluate_threshold(LOW_DO)


def test_non_finite_values_are_dropped():
    report = evaluate_threshold(LOW_DO + [np.nan, np.inf], threshold_min=5.0)
    assert report.sample_n == 6


def test_minimum_sample_size():
    with pytest.raises(InsufficientSampleError) as excinfo:
        evaluate_threshold([3.0, 3.1], threshold_min=5.0)
    assert excinfo.value.min_required == 3
    with pytest.raises(InsufficientSampleError):
        evaluate_threshold([3.0], threshold_min=5.0, min_n=1)


def test_small_samples_warn():
    with pytest.warns(UserWarning, match="observations"):
        report = evaluate_threshold([3.0, 3.2, 2.9, 3.1], threshold_min=5.0)
    assert report.warn_low_n

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        evaluate_threshold(LOW_DO, threshold_min=5.0)


def test_invalid_mode():
    with pytest.raises(ConfigurationError):
        evaluate_threshold(LOW_DO, threshold_min=5.0, mode="audit")


def test_report_to_dict_merges_result_fields():
    record = evaluate_threshold(LOW_DO, threshold_min=5.0).to_dict()
    assert record["type"] == "one-sample"
    assert record["mode"] == "compliance"
    assert record["evaluation_type"] == "min"
    assert record["threshold_min"] == 5.0
    assert record["threshold_max"] is None
    assert record["sample_n"] == 6
    assert "interpretation_detail" in record
    assert "p_value" in record


def test_compare_groups(welch_groups):
    g1, g2 = welch_groups
    with pytest.warns(UserWarning):
        report = compare_groups(g1, g2, higher_is_worse=True)
    assert report.result.significant
    assert report.sample1_n == 4
    assert report.sample2_n == 4
    assert report.warn_low_n
    assert report.interpretation_detail == (
        "Significant difference between groups (first group higher). "
        "Based on this parameter alone, the second group shows the more favorable level."
    )
    record = report.to_dict()
    assert record["type"] == "two-sample-welch"
    assert record["sample2_n"] == 4


def test_compare_groups_minimum_size():
    with pytest.raises(InsufficientSampleError) as excinfo:
        compare_groups([1.0, 2.0, 3.0], [1.0, 2.0])
    assert excinfo.value.group == "sample2"


def test_interpret_two_sample_variants(welch_groups):
    g1, g2 = welch_groups
    res = two_sample_welch(g2, g1, 0.05)
    assert interpret_two_sample(res) == "Significant difference between groups (second group higher)."
    assert interpret_two_sample(res, higher_is_worse=False).endswith(
        "the second group shows the more favorable level."
    )
    same = two_sample_welch([1.0, 2.0, 3.0], [1.5, 2.5, 2.0], 0.05)
    assert interpret_two_sample(same, True) == "No significant difference between the two group means."


def test_interpret_one_sample_falls_back_when_direction_mismatches():
    res = one_sample(LOW_DO, 5.0, 0.05, "two-sided")
    assert interpret_one_sample(res, EVAL_MIN, "compliance") == "Statistical difference detected."


def test_compare_groups_directional_alternative(welch_groups):
    g1, g2 = welch_groups
    with pytest.warns(UserWarning):
        greater = compare_groups(g1, g2, alternative="greater")
    with pytest.warns(UserWarning):
        less = compare_groups(g1, g2, alternative="less")
    assert greater.result.alternative == "greater"
    assert greater.result.significant
    assert not less.result.significant
    assert less.interpretation_detail == "No significant difference between the two group means."
