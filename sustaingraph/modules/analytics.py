"""Pareto frontier over (price, SIS): minimize price, maximize SIS."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

import numpy as np
import pandas as pd

from .schema import IS_PARETO, PRICE, SIS


def _frame_column(frame: pd.DataFrame, *candidates: str) -> str | None:
    return next((column for column in candidates if column in frame.columns), None)


def _price_score_matrix(points: Any) -> np.ndarray:
    if isinstance(points, pd.DataFrame):
        price_col = _frame_column(points, "price", PRICE)
        score_col = _frame_column(points, SIS, "sis")
        if price_col is None or score_col is None:
            # no usable axis: every row stays unflagged
            return np.full((len(points), 2), np.nan)
        frame = points.loc[:, [price_col, score_col]].apply(pd.to_numeric, errors="coerce")
        return frame.to_numpy(dtype=float)
    if isinstance(points, np.ndarray):
        matrix = np.asarray(points, dtype=float)
        return matrix.reshape(-1, 2) if matrix.size else np.zeros((0, 2))

    rows: List[tuple[float, float]] = []
    for point in points:
        if isinstance(point, Mapping):
            price = point.get("price", point.get(PRICE))
            score = point.get(SIS, point.get("sis"))
        else:
            price, score = point
        try:
            rows.append((float(price), float(score)))
        except (TypeError, ValueError):
            rows.append((np.nan, np.nan))
    return np.asarray(rows, dtype=float).reshape(-1, 2)


def compute_pareto_flags(points: Iterable[Any] | np.ndarray | pd.DataFrame) -> List[bool]:
    """Flag the points that no other point dominates.

    ``points`` may be a two-column ``(price, SIS)`` array, a sequence of
    mappings with ``price``/``SIS`` keys, or a frame with the price and SIS
    columns. Points are sorted by price and swept once with a running best
    SIS, so the cost is ``O(n log n)``. Exact duplicates of a frontier point
    are all flagged; non-finite points are never flagged.
    """

    matrix = _price_score_matrix(points)
    count = matrix.shape[0]
    flags = np.zeros(count, dtype=bool)
    if count == 0:
        return []

    prices = matrix[:, 0]
    scores = matrix[:, 1]
    finite = np.isfinite(prices) & np.isfinite(scores)
    candidates = np.nonzero(finite)[0]
    # price ascending, SIS descending within the same price
    order = candidates[np.lexsort((-scores[candidates], prices[candidates]))]

    best_so_far = -np.inf
    start = 0
    while start < len(order):
        price = prices[order[start]]
        stop = start
        while stop < len(order) and prices[order[stop]] == price:
            stop += 1
        group = order[start:stop]
        group_best = scores[group[0]]
        if group_best > best_so_far:
            flags[group[scores[group] == group_best]] = True
            best_so_far = group_best
        start = stop

    return flags.tolist()


def pareto_front(
    df: pd.DataFrame,
    price_col: str = PRICE,
    score_col: str = SIS,
) -> list:
    """Return the index labels of the non-dominated rows of ``df``."""

    if df.empty:
        return []
    return df.index[_flags_for(df, price_col, score_col)].tolist()


def _flags_for(df: pd.DataFrame, price_col: str, score_col: str) -> np.ndarray:
    matrix = np.column_stack(
        [
            pd.to_numeric(df[price_col], errors="coerce").to_numpy(dtype=float),
            pd.to_numeric(df[score_col], errors="coerce").to_numpy(dtype=float),
        ]
    )
    return np.asarray(compute_pareto_flags(matrix), dtype=bool)


def with_pareto_flags(
    df: pd.DataFrame,
    price_col: str = PRICE,
    score_col: str = SIS,
    flag_col: str = IS_PARETO,
) -> pd.DataFrame:
    """Return a copy of ``df`` with a boolean Pareto column."""

    flagged = df.copy()
    flagged[flag_col] = _flags_for(df, price_col, score_col) if not df.empty else pd.Series(dtype=bool)
    return flagged


__all__ = ["compute_pareto_flags", "pareto_front", "with_pareto_flags"]
