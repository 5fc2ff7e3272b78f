"""Min-max scaling of raw indicator columns.

Missing or non-numeric cells are excluded when computing the column bounds
and normalize to the neutral ``0.5``. Columns whose finite values are all
equal (or that have no finite values at all) normalize to ``0.5`` as well, so
the output never contains ``NaN`` or infinities.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from .schema import norm_column

DEGENERATE_VALUE = 0.5

__all__ = ["DEGENERATE_VALUE", "min_max", "normalize"]


def min_max(values: Iterable[float] | np.ndarray) -> tuple[np.ndarray, float, float]:
    """Return ``(normalized, min, max)`` for a one-dimensional sequence."""

    if not isinstance(values, np.ndarray):
        values = list(values)
    array = np.asarray(values, dtype=float)
    if array.size == 0:
        return np.empty(0, dtype=float), 0.0, 0.0

    finite = np.isfinite(array)
    if not finite.any():
        return np.full(array.shape, DEGENERATE_VALUE), 0.0, 0.0

    low = float(array[finite].min())
    high = float(array[finite].max())
    span = high - low
    if span <= 0.0:
        normalized = np.full(array.shape, DEGENERATE_VALUE)
    else:
        normalized = np.where(finite, (array - low) / span, DEGENERATE_VALUE)
        normalized = np.clip(normalized, 0.0, 1.0)
    return normalized, low, high


def normalize(records: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """Return a copy of ``records`` with a ``<column>_norm`` entry per column.

    Columns absent from ``records`` are treated as all-zero, which is a
    degenerate column and therefore normalizes to ``0.5``.
    """

    result = records.copy()
    if result.empty:
        for column in columns:
            result[norm_column(column)] = pd.Series(dtype=float)
        return result

    for column in columns:
        if column in result.columns:
            raw = pd.to_numeric(result[column], errors="coerce").to_numpy(dtype=float)
        else:
            raw = np.zeros(len(result), dtype=float)
        normalized, _, _ = min_max(raw)
        result[norm_column(column)] = normalized
    return result
