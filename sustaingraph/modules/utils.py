"""Utility helpers shared by the loaders, the pipeline and Streamlit pages."""

from __future__ import annotations

import math
from typing import Any

__all__ = [
    "safe_int",
    "safe_float",
    "parse_number",
    "rating_to_score",
    "yes_no_score",
    "format_number",
    "format_weight",
]

_RATING_LETTERS = {"A": 4.0, "B": 3.0, "C": 2.0, "D": 1.0}
_RATING_FALLBACK = 2.5

_TRUTHY = {"yes", "y", "true"}
_FALSY = {"no", "n", "false"}
_YES_NO_FALLBACK = 0.5


def safe_int(value: Any, default: int | None = 0) -> int | None:
    """Return ``value`` converted to ``int`` when possible.

    The helper mirrors :func:`int` but guards against ``None`` inputs,
    malformed strings and ``NaN`` floats. When conversion fails the
    provided ``default`` is returned instead of raising an exception.
    """

    try:
        if isinstance(value, str):
            candidate = value.strip()
            if not candidate:
                raise ValueError("empty string")
            number = float(candidate)
        else:
            number = float(value)
    except (TypeError, ValueError):
        return default

    if math.isnan(number):
        return default

    try:
        return int(number)
    except (OverflowError, ValueError, TypeError):
        return default


def safe_float(value: Any, default: float | None = None) -> float | None:
    """Convert ``value`` to ``float`` guarding against invalid inputs."""

    try:
        number = float(value)
    except (TypeError, ValueError):
        return default

    if math.isnan(number):
        return default

    return number


def parse_number(value: Any) -> float:
    """Parse CSV cells such as ``"$1 200"`` into floats, ``NaN`` when impossible."""

    if value is None:
        return math.nan
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).replace("$", "")
    text = "".join(text.split())
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def rating_to_score(value: Any) -> float:
    """Map a sustainability rating to a number.

    Numeric ratings pass through unchanged; letter grades ``A``-``D`` map to
    4-1 and anything else falls back to the 2.5 midpoint.
    """

    number = parse_number(value)
    if not math.isnan(number):
        return number
    letter = str(value or "").strip().upper()
    return _RATING_LETTERS.get(letter, _RATING_FALLBACK)


def yes_no_score(value: Any) -> float:
    """Map boolean-ish indicators (``Yes``/``No``/``1``/``0``) to ``[0, 1]``."""

    number = parse_number(value)
    if not math.isnan(number):
        return number
    token = str(value or "").strip().lower()
    if token in _TRUTHY:
        return 1.0
    if token in _FALSY:
        return 0.0
    return _YES_NO_FALLBACK


def format_number(
    value: Any,
    *,
    precision: int = 2,
    placeholder: str = "—",
) -> str:
    """Render a number with configurable precision or a placeholder."""

    number = safe_float(value)
    if number is None:
        return placeholder
    return f"{number:.{precision}f}"


def format_weight(value: Any, *, placeholder: str = "—") -> str:
    """Render an entropy weight as a percentage (``0.5163`` -> ``51.6%``)."""

    number = safe_float(value)
    if number is None:
        return placeholder
    return f"{number * 100:.1f}%"
