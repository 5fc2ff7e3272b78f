"""Three-category recommendations drawn from the Pareto set.

Only non-dominated records are recommended. The same Pareto set is ordered
three ways:

* ``max_sustainability`` - highest SIS first;
* ``best_value`` - lowest price first;
* ``balanced`` - closest to the ideal point (lowest price, highest SIS) once
  price and SIS are min-max normalized over the Pareto set.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from .analytics import with_pareto_flags
from .errors import ConfigurationError
from .normalization import min_max
from .schema import IS_PARETO, PRICE, SIS

LOGGER = logging.getLogger(__name__)

DISTANCE_COLUMN = "distanceToIdeal"
BALANCE_COLUMN = "balanceScore"

_MAX_DISTANCE = math.sqrt(2.0)


@dataclass
class Recommendations:
    max_sustainability: pd.DataFrame
    best_value: pd.DataFrame
    balanced: pd.DataFrame

    def categories(self) -> Dict[str, pd.DataFrame]:
        return {
            "maxSustainability": self.max_sustainability,
            "bestValue": self.best_value,
            "balanced": self.balanced,
        }

    def is_empty(self) -> bool:
        return all(frame.empty for frame in self.categories().values())

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            name: frame.to_dict(orient="records")
            for name, frame in self.categories().items()
        }


def _validate_top_n(top_n: Any) -> int:
    if isinstance(top_n, bool):
        raise ConfigurationError(f"top_n must be a positive integer, got {top_n!r}")
    try:
        value = int(top_n)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"top_n must be a positive integer, got {top_n!r}") from exc
    if value != top_n or value < 1:
        raise ConfigurationError(f"top_n must be a positive integer, got {top_n!r}")
    return value


def balance_scores(pareto: pd.DataFrame) -> pd.DataFrame:
    """Attach ``distanceToIdeal`` and ``balanceScore`` to a Pareto frame."""

    result = pareto.copy()
    price_norm = min_max(pd.to_numeric(result[PRICE], errors="coerce").to_numpy(dtype=float))[0]
    sis_norm = min_max(pd.to_numeric(result[SIS], errors="coerce").to_numpy(dtype=float))[0]
    distance = np.sqrt(price_norm ** 2 + (1.0 - sis_norm) ** 2)
    result[DISTANCE_COLUMN] = distance
    result[BALANCE_COLUMN] = 1.0 - distance / _MAX_DISTANCE
    return result


def build_recommendations(
    scored: pd.DataFrame,
    top_n: int = 5,
) -> Recommendations:
    """Build the three recommendation lists from scored records.

    Each list holds at most ``top_n`` rows, all flagged ``isPareto``.
    """

    limit = _validate_top_n(top_n)

    if scored is None or scored.empty or PRICE not in scored.columns or SIS not in scored.columns:
        columns = list(scored.columns) if scored is not None else []
        empty = pd.DataFrame(columns=columns + [IS_PARETO])
        LOGGER.debug("No scored records; recommendations are empty")
        return Recommendations(
            max_sustainability=empty.copy(),
            best_value=empty.copy(),
            balanced=pd.DataFrame(columns=columns + [IS_PARETO, DISTANCE_COLUMN, BALANCE_COLUMN]),
        )

    flagged = with_pareto_flags(scored)
    pareto = flagged.loc[flagged[IS_PARETO]].copy()

    max_sustainability = pareto.sort_values(
        [SIS, PRICE], ascending=[False, True], kind="mergesort"
    ).head(limit)
    best_value = pareto.sort_values(
        [PRICE, SIS], ascending=[True, False], kind="mergesort"
    ).head(limit)
    balanced = balance_scores(pareto).sort_values(
        [DISTANCE_COLUMN, SIS, PRICE], ascending=[True, False, True], kind="mergesort"
    ).head(limit)

    LOGGER.debug(
        "Pareto set holds %d of %d record(s); top_n=%d",
        len(pareto),
        len(scored),
        limit,
    )
    return Recommendations(
        max_sustainability=max_sustainability,
        best_value=best_value,
        balanced=balanced,
    )


__all__ = [
    "BALANCE_COLUMN",
    "DISTANCE_COLUMN",
    "Recommendations",
    "balance_scores",
    "build_recommendations",
]
