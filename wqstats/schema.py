"""Define the configuration and result records exchanged with callers."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from .errors import ConfigurationError

TWO_SIDED = "two-sided"
GREATER = "greater"
LESS = "less"
ALTERNATIVES: Tuple[str, ...] = (TWO_SIDED, GREATER, LESS)

ONE_SAMPLE = "one-sample"
TWO_SAMPLE_WELCH = "two-sample-welch"
TOST = "tost"
TEST_TYPES: Tuple[str, ...] = (ONE_SAMPLE, TWO_SAMPLE_WELCH, TOST)

# Accepted spellings of the test discriminator in incoming mappings.
_TEST_ALIASES = {
    "one-sample": ONE_SAMPLE,
    "one_sample": ONE_SAMPLE,
    "two-sample": TWO_SAMPLE_WELCH,
    "two_sample": TWO_SAMPLE_WELCH,
    "two-sample-welch": TWO_SAMPLE_WELCH,
    "welch": TWO_SAMPLE_WELCH,
    "tost": TOST,
}

DEFAULT_ALPHA = 0.05
CONFIDENCE_LEVELS: Tuple[float, ...] = (0.90, 0.95, 0.99)


def validate_alpha(alpha: float) -> float:
    """Return ``alpha`` as a float, rejecting values outside ``(0, 1)``."""
    try:
        a = float(alpha)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"alpha must be a number, got {alpha!r}") from exc
    if not math.isfinite(a) or not (0.0 < a < 1.0):
        raise ConfigurationError(f"alpha must lie strictly between 0 and 1, got {alpha!r}")
    return a


def validate_alternative(alternative: str) -> str:
    """Return ``alternative`` unchanged if it is a recognised hypothesis direction."""
    if alternative not in ALTERNATIVES:
        raise ConfigurationError(
            f"alternative must be one of {ALTERNATIVES}, got {alternative!r}"
        )
    return alternative


def _as_sample(values: Any, label: str) -> Tuple[float, ...]:
    if values is None:
        raise ConfigurationError(f"'{label}' is required for this test")
    try:
        arr = np.asarray(values, dtype=float).ravel()
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{label}' must be a sequence of numbers") from exc
    return tuple(float(v) for v in arr)


def _as_float(value: Any, label: str) -> float:
    if value is None:
        raise ConfigurationError(f"'{label}' is required for this test")
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{label}' must be a number, got {value!r}") from exc
    if math.isnan(out):
        raise ConfigurationError(f"'{label}' must not be NaN")
    return out


@dataclass(frozen=True)
class TestConfiguration:
    """Inputs governing one test invocation.

    Attributes:
        test: One of ``TEST_TYPES``.
        sample: Measurements of the (first) group.
        sample2: Second group, required for ``two-sample-welch``.
        mu0: Comparison value, required for ``one-sample``.
        lower: Lower equivalence bound, required for ``tost``.
        upper: Upper equivalence bound, required for ``tost``.
        alpha: Significance level in ``(0, 1)``.
        alternative: ``two-sided``, ``greater`` or ``less``; TOST ignores it.
    """

    __test__ = False

    test: str
    sample: Tuple[float, ...]
    sample2: Optional[Tuple[float, ...]] = None
    mu0: Optional[float] = None
    lower: Optional[float] = None
    upper: Optional[float] = None
    alpha: float = DEFAULT_ALPHA
    alternative: str = TWO_SIDED

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TestConfiguration":
        """Build and validate a configuration from a plain mapping.

        When ``test`` is absent it is inferred: ``sample2`` implies Welch,
        ``lower``/``upper`` imply TOST, otherwise one-sample. A
        ``confidence_level`` key is accepted in place of ``alpha``.

        Raises:
            ConfigurationError: On any missing or invalid option.
        """
        raw_test = data.get("test")
        if raw_test is None:
            if data.get("sample2") is not None:
                raw_test = TWO_SAMPLE_WELCH
            elif data.get("lower") is not None or data.get("upper") is not None:
                raw_test = TOST
            else:
                raw_test = ONE_SAMPLE
        test = _TEST_ALIASES.get(str(raw_test).strip().lower())
        if test is None:
            raise ConfigurationError(f"Unknown test type {raw_test!r}; expected one of {TEST_TYPES}")

        if "alpha" in data and data["alpha"] is not None:
            alpha = validate_alpha(data["alpha"])
        elif data.get("confidence_level") is not None:
            alpha = validate_alpha(1.0 - _as_float(data["confidence_level"], "confidence_level"))
        else:
            alpha = DEFAULT_ALPHA
        alternative = validate_alternative(data.get("alternative") or TWO_SIDED)

        sample = _as_sample(data.get("sample"), "sample")
        kwargs: Dict[str, Any] = {}
        if test == ONE_SAMPLE:
            kwargs["mu0"] = _as_float(data.get("mu0"), "mu0")
        elif test == TWO_SAMPLE_WELCH:
            kwargs["sample2"] = _as_sample(data.get("sample2"), "sample2")
        else:
            lower = _as_float(data.get("lower"), "lower")
            upper = _as_float(data.get("upper"), "upper")
            if not lower < upper:
                raise ConfigurationError(
                    f"Equivalence bounds require lower < upper, got [{lower}, {upper}]"
                )
            kwargs["lower"] = lower
            kwargs["upper"] = upper

        return cls(test=test, sample=sample, alpha=alpha, alternative=alternative, **kwargs)


class _ResultMixin:
    def to_dict(self) -> Dict[str, Any]:
        """Return the record as a plain ``dict`` keyed by field name."""
        return asdict(self)


@dataclass(frozen=True)
class OneSampleResult(_ResultMixin):
    mean: float
    sd: float
    n: int
    mu0: float
    t: float
    df: float
    p_value: float
    alpha: float
    significant: bool
    alternative: str
    ci_level: float
    ci_lower: float
    ci_upper: float
    type: str = field(default=ONE_SAMPLE)


@dataclass(frozen=True)
class WelchResult(_ResultMixin):
    mean1: float
    mean2: float
    sd1: float
    sd2: float
    n1: int
    n2: int
    t: float
    df: float
    p_value: float
    alpha: float
    significant: bool
    alternative: str
    diff_mean: float
    ci_level: float
    ci_lower: float
    ci_upper: float
    type: str = field(default=TWO_SAMPLE_WELCH)


@dataclass(frozen=True)
class TostResult(_ResultMixin):
    """Two one-sided tests against ``[lower, upper]``.

    ``significant`` always equals ``equivalent``; the interval is reported at
    ``ci_level = 1 - 2 * alpha``.
    """

    mean: float
    sd: float
    n: int
    lower: float
    upper: float
    t_lower: float
    t_upper: float
    p_lower: float
    p_upper: float
    df: float
    alpha: float
    equivalent: bool
    significant: bool
    ci_level: float
    ci_lower: float
    ci_upper: float
    interpretation: str
    alternative: str = TWO_SIDED
    type: str = field(default=TOST)

    @property
    def p_value(self) -> float:
        """Overall TOST p-value, the larger of the two one-sided p-values."""
        return max(self.p_lower, self.p_upper)
