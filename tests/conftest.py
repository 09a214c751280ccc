"""Pytest configuration and shared measurement samples."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")


@pytest.fixture
def ph_sample():
    """Five pH readings centred on 8.0."""
    return [7.9, 8.0, 8.1, 7.95, 8.05]


@pytest.fixture
def welch_groups():
    """Two groups with clearly separated means and unequal spread."""
    return [10.0, 12.0, 11.0, 13.0], [5.0, 6.0, 7.0, 5.0]


@pytest.fixture
def tost_sample():
    """Four readings well inside the range [4.5, 5.5]."""
    return [5.1, 5.2, 4.9, 5.0]
