"""Tests for CSV and text export of test results."""

import os

import pandas as pd

from wqstats.compliance import evaluate_threshold
from wqstats.output import save_results_to_csv, save_summary_text
from wqstats.ttest import one_sample


def test_save_results_to_csv(tmp_path, ph_sample):
    out_dir = tmp_path / "nested" / "out"
    path = save_results_to_csv([one_sample(ph_sample, 8.0, 0.05)], output_dir=str(out_dir))
    assert os.path.exists(path)
    assert os.path.basename(path) == "test_results.csv"

    df = pd.read_csv(path)
    assert len(df) == 1
    assert df.loc[0, "type"] == "one-sample"
    assert df.loc[0, "Decision"] == "not significant"


def test_save_results_includes_report_fields(tmp_path):
    report = evaluate_threshold([3.0, 3.2, 2.9, 3.1, 3.0, 3.1], threshold_min=5.0)
    path = save_results_to_csv([report], output_dir=str(tmp_path))
    df = pd.read_csv(path)
    assert df.loc[0, "evaluation_type"] == "min"
    assert df.loc[0, "interpretation_detail"].startswith("Mean is statistically BELOW")


def test_save_summary_text(tmp_path, ph_sample):
    results = [one_sample(ph_sample, 8.0, 0.05), one_sample(ph_sample, 7.5, 0.05)]
    path = save_summary_text(results, output_dir=str(tmp_path))
    with open(path, encoding="utf-8") as fh:
        text = fh.read()
    assert text.count("Test: one-sample") == 2
    assert "Decision: significant" in text
    assert "Decision: not significant" in text
