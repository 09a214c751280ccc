"""Exception types raised by the hypothesis-testing engine."""

from __future__ import annotations

from typing import Optional


class WqStatsError(Exception):
    """Base class for all engine errors."""


class InsufficientSampleError(WqStatsError, ValueError):
    """A sample has fewer observations than the operation requires.

    Attributes:
        n: Number of observations supplied.
        min_required: Minimum number of observations needed.
        group: Optional label of the offending group (``"sample1"`` etc.).
    """

    def __init__(
        self, n: int, min_required: int = 2, group: Optional[str] = None, message: str = ""
    ):
        self.n = int(n)
        self.min_required = int(min_required)
        self.group = group
        if not message:
            where = f" in {group}" if group else ""
            message = (
                f"Insufficient valid data{where}. "
                f"Found {self.n} observations, minimum {self.min_required} required."
            )
        super().__init__(message)


class DegenerateSampleError(InsufficientSampleError):
    """Variance (or a quantity derived from it) is undefined for the sample."""


class DomainError(WqStatsError, ValueError):
    """An argument lies outside the valid domain of a numerical routine."""


class ConfigurationError(WqStatsError, ValueError):
    """A test configuration value is missing or invalid."""
