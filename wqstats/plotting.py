"""Render confidence-interval figures for test results.

Plotting functions accept precomputed results and perform no statistics.
Figures are black-and-white friendly and saved as PNG, PDF and SVG.
"""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any, Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from .schema import TOST, TWO_SAMPLE_WELCH

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300
FIGSIZE_SINGLE: tuple[float, float] = (7.0, 3.2)

_REQUIRED_FIELDS = {"type", "ci_lower", "ci_upper", "ci_level"}


def setup_plot_style() -> None:
    """Apply the project plotting style (serif fonts, no top/right spines)."""
    plt.rcParams.update(
        {
            "font.family": "serif",
            "font.size": 11,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "axes.linewidth": 1.0,
            "savefig.dpi": FIGURE_DPI,
        }
    )


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = OUTPUT_FORMATS,
    dpi: int = FIGURE_DPI,
) -> Path:
    """Save a figure to multiple formats using one extensionless base path."""
    base = Path(savepath_base)
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in formats:
        fig.savefig(
            str(base.with_suffix(f".{ext}")),
            dpi=dpi if ext == "png" else None,
            bbox_inches="tight",
            pad_inches=0.12,
        )
    return base.with_suffix(".png")


def plot_confidence_interval(
    result: Any,
    output_dir: str = "output",
    threshold_min: Optional[float] = None,
    threshold_max: Optional[float] = None,
    title: Optional[str] = None,
) -> str:
    """Plot a point estimate with its confidence interval against references.

    Args:
        result: Result record or report (anything with ``to_dict()``) or a
            plain dict carrying at least ``type``, ``ci_lower``, ``ci_upper``
            and ``ci_level``.
        output_dir (str, optional): Directory for the figure bundle.
        threshold_min (float, optional): Minimum threshold drawn as a dashed line.
        threshold_max (float, optional): Maximum threshold drawn as a dashed line.
        title (str, optional): Figure title. Defaults to the test type.

    Returns:
        str: Path to the saved PNG file.

    Raises:
        KeyError: If required fields are missing from ``result``.

    Note:
        One-sample results draw ``mu0``; TOST results draw the equivalence
        bounds; Welch results plot the mean difference against zero.
    """
    record = result.to_dict() if hasattr(result, "to_dict") else dict(result)
    missing = _REQUIRED_FIELDS - set(record.keys())
    if missing:
        raise KeyError(
            f"result missing required fields: {missing}. "
            f"Expected fields: {_REQUIRED_FIELDS}"
        )

    kind = record["type"]
    if kind == TWO_SAMPLE_WELCH:
        estimate = float(record["diff_mean"])
        label = "Mean difference (group 1 − group 2)"
        references = [(0.0, "no difference")]
    else:
        estimate = float(record["mean"])
        label = "Mean"
        references = []
        if kind == TOST:
            references += [(float(record["lower"]), "lower bound"), (float(record["upper"]), "upper bound")]
        elif record.get("mu0") is not None:
            references.append((float(record["mu0"]), r"$\mu_0$"))
    if threshold_min is not None:
        references.append((float(threshold_min), "minimum"))
    if threshold_max is not None:
        references.append((float(threshold_max), "maximum"))

    setup_plot_style()
    os.makedirs(output_dir, exist_ok=True)

    fig, ax = plt.subplots(figsize=FIGSIZE_SINGLE)
    lo = float(record["ci_lower"])
    hi = float(record["ci_upper"])
    ax.errorbar(
        [estimate],
        [0.0],
        xerr=[[estimate - lo], [hi - estimate]],
        fmt="o",
        color="black",
        capsize=6,
        linewidth=1.8,
        label=f"{label}, {100.0 * float(record['ci_level']):.0f}% CI",
    )
    styles = ("--", ":", "-.", (0, (5, 1)))
    seen = set()
    for i, (value, name) in enumerate(references):
        if not math.isfinite(value) or (value, name) in seen:
            continue
        seen.add((value, name))
        ax.axvline(value, color="0.35", linestyle=styles[i % len(styles)], linewidth=1.2, label=name)

    ax.set_yticks([])
    ax.set_ylim(-1.0, 1.0)
    ax.set_xlabel(label)
    ax.set_title(title or kind)
    ax.legend(loc="upper right", frameon=False, fontsize=9)

    png_path = save_figure(fig, Path(output_dir) / f"ci_{kind}")
    plt.close(fig)
    return str(png_path)
