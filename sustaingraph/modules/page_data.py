"""Helper utilities for building data tables shown in Streamlit pages.

These helpers turn analysis results into small ``pandas`` tables so that the
Streamlit views stay thin. They avoid any Streamlit imports in order to
remain easy to unit test.
"""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from .config import AnalysisConfig
from .entropy import ENV_GROUP, POLICY_GROUP, EntropyWeights
from .ranking import BALANCE_COLUMN, DISTANCE_COLUMN
from .schema import (
    BRAND_NAME,
    COLUMN_LABELS,
    COUNTRY,
    MATERIAL,
    PRICE,
    SIS,
)
from .scoring import Stats

ANALYSIS_STATE_KEY = "analysis_state"
"""``st.session_state`` key holding the latest :class:`AnalysisState`."""

RECOMMENDATION_COLUMNS: Sequence[str] = (BRAND_NAME, MATERIAL, COUNTRY, PRICE, SIS)


def build_weights_table(weights: EntropyWeights, config: AnalysisConfig | None = None) -> pd.DataFrame:
    """Per-indicator entropy and weight, grouped by environmental/policy."""

    config = config or AnalysisConfig()
    groups = {
        ENV_GROUP: ("Environmental", config.indicator_columns.environmental),
        POLICY_GROUP: ("Policy", config.indicator_columns.policy),
    }
    rows = []
    for group, (label, columns) in groups.items():
        entropies = weights.column_entropy.get(group, ())
        column_weights = weights.column_weights.get(group, ())
        for position, column in enumerate(columns):
            rows.append(
                {
                    "Group": label,
                    "Indicator": COLUMN_LABELS.get(column, column),
                    "Entropy": entropies[position] if position < len(entropies) else None,
                    "Weight in group": column_weights[position] if position < len(column_weights) else None,
                }
            )
    return pd.DataFrame(rows, columns=["Group", "Indicator", "Entropy", "Weight in group"])


def build_data_quality_table(stats: Stats) -> pd.DataFrame:
    """Spread of every environmental indicator (min, max, variance, CV)."""

    rows = [
        {
            "Indicator": COLUMN_LABELS.get(column, column),
            "Min": quality.get("min"),
            "Max": quality.get("max"),
            "Variance": quality.get("variance"),
            "CV": quality.get("cv"),
        }
        for column, quality in stats.data_quality.items()
    ]
    return pd.DataFrame(rows, columns=["Indicator", "Min", "Max", "Variance", "CV"])


def build_recommendation_table(frame: pd.DataFrame) -> pd.DataFrame:
    """Display subset of one recommendation list with a 1-based rank."""

    columns = [column for column in RECOMMENDATION_COLUMNS if column in frame.columns]
    for extra in (BALANCE_COLUMN, DISTANCE_COLUMN):
        if extra in frame.columns:
            columns.append(extra)
    table = frame.loc[:, columns].reset_index(drop=True)
    table.insert(0, "Rank", range(1, len(table) + 1))
    return table.rename(columns={column: COLUMN_LABELS.get(column, column) for column in columns})


__all__ = [
    "ANALYSIS_STATE_KEY",
    "RECOMMENDATION_COLUMNS",
    "build_data_quality_table",
    "build_recommendation_table",
    "build_weights_table",
]
