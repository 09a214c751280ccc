#!/usr/bin/env python3
"""
Main script for running water-quality t-tests on exported measurements.
"""

# Pipeline overview (README-style):
# 1) Load a long-format CSV of measurements (value, timestamp, optional group).
# 2) Drop non-numeric values and aggregate readings per local month or day
#    (or keep raw readings).
# 3) Run a one-sample, Welch two-sample or TOST test, or evaluate the sample
#    against minimum/maximum thresholds with automatic direction selection.
# 4) Export the result table, a text summary and a confidence-interval figure.

import argparse
import logging
import os
import sys
import time

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("wqstats_analysis.log", mode="w"),
    ],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from wqstats.compliance import EVALUATION_TYPES, MODES, compare_groups, evaluate_threshold
from wqstats.data_processing import (
    AGGREGATIONS,
    DEFAULT_AGGREGATION,
    DEFAULT_TIMEZONE,
    aggregate_measurements,
    extract_samples,
    load_measurements,
)
from wqstats.errors import ConfigurationError, WqStatsError
from wqstats.output import save_results_to_csv, save_summary_text
from wqstats.plotting import plot_confidence_interval
from wqstats.reporting import summary_lines
from wqstats.schema import ALTERNATIVES, CONFIDENCE_LEVELS, TWO_SIDED
from wqstats.ttest import run_test

DEFAULT_OUTPUT_DIR = "output"


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for script execution."""
    parser = argparse.ArgumentParser(
        description="Hypothesis tests for water-quality measurements."
    )
    parser.add_argument("--input", required=True, help="Path to input CSV file.")
    parser.add_argument(
        "--test",
        choices=["one-sample", "two-sample", "tost", "threshold"],
        default="one-sample",
        help="Test to run; 'threshold' derives it from --threshold-min/--threshold-max.",
    )
    parser.add_argument("--value-col", default="value", help="Measured value column.")
    parser.add_argument("--time-col", default="sampled_at", help="Timestamp column.")
    parser.add_argument("--group-col", default=None, help="Group (water body) column.")
    parser.add_argument(
        "--groups",
        nargs=2,
        default=None,
        metavar=("GROUP1", "GROUP2"),
        help="Two group labels to compare (two-sample) or select (first is used otherwise).",
    )
    parser.add_argument(
        "--aggregation",
        choices=AGGREGATIONS,
        default=DEFAULT_AGGREGATION,
        help=f"Aggregation of readings (default: {DEFAULT_AGGREGATION}).",
    )
    parser.add_argument("--tz", default=DEFAULT_TIMEZONE, help="Local reporting timezone.")
    parser.add_argument(
        "--confidence-level",
        type=float,
        choices=CONFIDENCE_LEVELS,
        default=0.95,
        help="Confidence level; alpha = 1 - confidence level.",
    )
    parser.add_argument(
        "--alternative",
        choices=ALTERNATIVES,
        default=TWO_SIDED,
        help="Alternative hypothesis for one-sample and two-sample tests; "
        "threshold runs derive it from --mode and TOST ignores it.",
    )
    parser.add_argument("--mu0", type=float, default=None, help="Comparison value.")
    parser.add_argument("--lower", type=float, default=None, help="TOST lower bound.")
    parser.add_argument("--upper", type=float, default=None, help="TOST upper bound.")
    parser.add_argument("--threshold-min", type=float, default=None)
    parser.add_argument("--threshold-max", type=float, default=None)
    parser.add_argument(
        "--eval-type",
        choices=EVALUATION_TYPES,
        default=None,
        help="Override the evaluation type derived from the thresholds.",
    )
    parser.add_argument("--mode", choices=MODES, default="compliance")
    parser.add_argument("--min-n", type=int, default=3, help="Minimum observations per group.")
    parser.add_argument(
        "--outdir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR}).",
    )
    return parser


def _load_samples(args):
    df = load_measurements(args.input)
    logging.info("Loaded %d rows from %s", len(df), args.input)
    if args.group_col:
        df[args.group_col] = df[args.group_col].astype(str)
    agg = aggregate_measurements(
        df,
        value_col=args.value_col,
        time_col=args.time_col,
        group_col=args.group_col,
        aggregation=args.aggregation,
        tz=args.tz,
    )
    logging.info("Aggregated to %d observations (%s)", len(agg), args.aggregation)
    samples = extract_samples(agg, group_col=args.group_col, groups=args.groups)
    if not samples:
        raise ConfigurationError(f"No usable measurements found in {args.input}")
    return list(samples.values())


def run(args) -> int:
    start_time = time.time()
    samples = _load_samples(args)
    alpha = 1.0 - args.confidence_level

    if args.test == "threshold":
        report = evaluate_threshold(
            samples[0],
            threshold_min=args.threshold_min,
            threshold_max=args.threshold_max,
            alpha=alpha,
            mode=args.mode,
            evaluation_type=args.eval_type,
            manual_mu0=args.mu0,
            min_n=args.min_n,
        )
        result = report
    elif args.test == "two-sample":
        if len(samples) < 2:
            raise ConfigurationError("Two-sample test requires --group-col with two groups")
        result = compare_groups(
            samples[0],
            samples[1],
            alpha=alpha,
            min_n=args.min_n,
            alternative=args.alternative,
        )
    else:
        config = {
            "test": args.test,
            "sample": samples[0],
            "mu0": args.mu0,
            "lower": args.lower,
            "upper": args.upper,
            "alpha": alpha,
            "alternative": args.alternative,
        }
        result = run_test(config)

    for line in summary_lines(result):
        logging.info(line)

    save_results_to_csv([result], args.outdir)
    save_summary_text([result], args.outdir)
    figure = plot_confidence_interval(
        result,
        args.outdir,
        threshold_min=args.threshold_min,
        threshold_max=args.threshold_max,
    )
    logging.info("  - Confidence interval figure: %s", figure)
    logging.info(f"Total execution time: {time.time() - start_time:.2f} seconds")
    return 0


def main(argv=None) -> int:
    """CLI entrypoint."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    try:
        return run(args)
    except WqStatsError as exc:
        logging.error("Analysis failed: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
