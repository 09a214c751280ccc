"""Write test results to reproducible CSV and text files.

This module is the output boundary between in-memory results and exported
artifacts.
"""

from __future__ import annotations

import os
from typing import Any, Iterable

from .reporting import results_dataframe, summary_lines


def save_results_to_csv(results: Iterable[Any], output_dir: str = "output") -> str:
    """Save result records to ``test_results.csv``.

    Args:
        results: Result records or reports (anything with ``to_dict()``).
        output_dir (str): Directory where the CSV is written; created if
            missing.

    Returns:
        str: Path to the written CSV file.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "test_results.csv")
    results_dataframe(results).to_csv(path, index=False)
    print(f"Saved test results to {path}")
    return path


def save_summary_text(results: Iterable[Any], output_dir: str = "output") -> str:
    """Save readable summaries of the results to ``test_summary.txt``."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, "test_summary.txt")
    blocks = ["\n".join(summary_lines(res)) for res in results]
    with open(path, "w", encoding="utf-8") as fh:
        fh.write("\n\n".join(blocks) + "\n")
    print(f"Saved test summary to {path}")
    return path
