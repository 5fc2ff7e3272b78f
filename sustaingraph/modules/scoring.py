"""Sustainability Index Score (SIS) composition and batch aggregates.

The composer normalizes the configured indicator columns, inverts the
environmental footprints so that every indicator reads "higher is better",
derives entropy weights for both groups and blends the group scores into
one SIS per record::

    SIS = w_env * envScore + w_policy * policyScore,  w_env + w_policy = 1

It also returns the descriptive statistics shown in the dashboard KPIs and
one aggregate row per material, which the clustering step consumes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Sequence

import numpy as np
import pandas as pd

from .config import AnalysisConfig
from .entropy import ENV_GROUP, POLICY_GROUP, EntropyWeights, compute_entropy_weights
from .io import prepare_records
from .normalization import min_max, normalize
from .schema import (
    BRAND_ID,
    BRAND_NAME,
    CARBON,
    COUNTRY,
    ENV_SCORE,
    ENV_SCORE_NORM,
    MARKET_TREND,
    MATERIAL,
    POLICY_SCORE,
    POLICY_SCORE_NORM,
    PRICE,
    RATING,
    RECYCLING,
    SIS,
    UNKNOWN_LABEL,
    WASTE,
    WATER,
    YEAR,
    norm_column,
)

LOGGER = logging.getLogger(__name__)

STAT_FIELDS: tuple[str, ...] = (SIS, CARBON, WATER, WASTE, PRICE)

MATERIAL_AGG_COLUMNS: tuple[str, ...] = (
    MATERIAL,
    "count",
    "meanCarbon",
    "meanWater",
    "meanWaste",
    "meanPrice",
    "meanSIS",
    "meanEnvNorm",
    "meanPolicyNorm",
    "meanRating",
    "meanRecycling",
)

BRAND_AGG_COLUMNS: tuple[str, ...] = ("Brand", "count", "meanPrice", "meanSIS")

_MATERIAL_MEANS: Dict[str, str] = {
    "meanCarbon": CARBON,
    "meanWater": WATER,
    "meanWaste": WASTE,
    "meanPrice": PRICE,
    "meanSIS": SIS,
    "meanEnvNorm": ENV_SCORE_NORM,
    "meanPolicyNorm": POLICY_SCORE_NORM,
    "meanRating": RATING,
    "meanRecycling": RECYCLING,
}

BREAKDOWN_DIMENSIONS: tuple[str, ...] = (MATERIAL, COUNTRY, MARKET_TREND, YEAR)

_BREAKDOWN_MEANS: Dict[str, str] = {
    "meanSIS": SIS,
    "meanPrice": PRICE,
    "meanCarbon": CARBON,
    "meanWater": WATER,
    "meanWaste": WASTE,
}


@dataclass
class Stats:
    """Batch-level descriptive statistics."""

    brand_count: int = 0
    avg_sis: float = 0.0
    avg_price: float = 0.0
    avg_carbon: float = 0.0
    avg_water: float = 0.0
    avg_waste: float = 0.0
    mean: Dict[str, float] = field(default_factory=dict)
    median: Dict[str, float] = field(default_factory=dict)
    std: Dict[str, float] = field(default_factory=dict)
    data_quality: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "brandCount": self.brand_count,
            "avgSIS": self.avg_sis,
            "avgPrice": self.avg_price,
            "avgCarbon": self.avg_carbon,
            "avgWater": self.avg_water,
            "avgWaste": self.avg_waste,
            "mean": dict(self.mean),
            "median": dict(self.median),
            "std": dict(self.std),
            "DATA_QUALITY": {key: dict(value) for key, value in self.data_quality.items()},
        }


@dataclass
class SISResult:
    scored: pd.DataFrame
    stats: Stats
    material_agg: pd.DataFrame
    weights: EntropyWeights


def _finite_values(frame: pd.DataFrame, column: str) -> np.ndarray:
    if column not in frame.columns:
        return np.empty(0, dtype=float)
    values = pd.to_numeric(frame[column], errors="coerce").to_numpy(dtype=float)
    return values[np.isfinite(values)]


def indicator_quality(values: Iterable[float]) -> Dict[str, float]:
    """Min, max, population variance and coefficient of variation."""

    array = np.asarray(list(values), dtype=float)
    array = array[np.isfinite(array)]
    if array.size == 0:
        return {"min": 0.0, "max": 0.0, "variance": 0.0, "cv": 0.0}
    mean = float(array.mean())
    variance = float(array.var())
    cv = float(np.sqrt(variance) / mean) if mean != 0 else 0.0
    return {
        "min": float(array.min()),
        "max": float(array.max()),
        "variance": variance,
        "cv": cv,
    }


def _brand_keys(frame: pd.DataFrame) -> pd.Series:
    names = frame.get(BRAND_NAME, pd.Series("", index=frame.index)).fillna("").astype(str).str.strip()
    ids = frame.get(BRAND_ID, pd.Series("", index=frame.index)).fillna("").astype(str).str.strip()
    return names.where(names.ne(""), ids)


def compute_stats(
    scored: pd.DataFrame,
    environmental_columns: Sequence[str] = (CARBON, WATER, WASTE),
) -> Stats:
    """Means, medians, standard deviations and data-quality figures."""

    if scored.empty:
        return Stats()

    mean: Dict[str, float] = {}
    median: Dict[str, float] = {}
    std: Dict[str, float] = {}
    for column in STAT_FIELDS:
        values = _finite_values(scored, column)
        if values.size == 0:
            mean[column] = median[column] = std[column] = 0.0
            continue
        mean[column] = float(values.mean())
        median[column] = float(np.median(values))
        std[column] = float(values.std())

    brands = _brand_keys(scored)
    data_quality = {
        column: indicator_quality(_finite_values(scored, column))
        for column in environmental_columns
    }

    return Stats(
        brand_count=int(brands[brands.ne("")].nunique()),
        avg_sis=mean[SIS],
        avg_price=mean[PRICE],
        avg_carbon=mean[CARBON],
        avg_water=mean[WATER],
        avg_waste=mean[WASTE],
        mean=mean,
        median=median,
        std=std,
        data_quality=data_quality,
    )


def _numeric_column(frame: pd.DataFrame, column: str) -> pd.Series:
    if column not in frame.columns:
        return pd.Series(0.0, index=frame.index)
    return pd.to_numeric(frame[column], errors="coerce")


def aggregate_by_material(scored: pd.DataFrame) -> pd.DataFrame:
    """One row per ``Material_Type`` with counts and arithmetic means.

    Rows keep the order in which each material first appears. Blank materials
    are grouped under ``"Unknown"``.
    """

    if scored.empty:
        return pd.DataFrame(columns=list(MATERIAL_AGG_COLUMNS))

    keys = scored.get(MATERIAL, pd.Series("", index=scored.index)).fillna("").astype(str).str.strip()
    working = pd.DataFrame({MATERIAL: keys.where(keys.ne(""), UNKNOWN_LABEL)})
    for target, source in _MATERIAL_MEANS.items():
        working[target] = _numeric_column(scored, source)

    grouped = working.groupby(MATERIAL, sort=False)
    aggregated = grouped[list(_MATERIAL_MEANS)].mean()
    aggregated.insert(0, "count", grouped.size())
    aggregated = aggregated.fillna(0.0).reset_index()
    aggregated["count"] = aggregated["count"].astype(int)
    return aggregated[list(MATERIAL_AGG_COLUMNS)]


def aggregate_by_brand(scored: pd.DataFrame) -> pd.DataFrame:
    """One row per brand (name, falling back to id) with mean price and SIS."""

    if scored.empty:
        return pd.DataFrame(columns=list(BRAND_AGG_COLUMNS))

    keys = _brand_keys(scored)
    working = pd.DataFrame(
        {
            "Brand": keys.where(keys.ne(""), UNKNOWN_LABEL),
            "meanPrice": _numeric_column(scored, PRICE),
            "meanSIS": _numeric_column(scored, SIS),
        }
    )
    grouped = working.groupby("Brand", sort=False)
    aggregated = grouped[["meanPrice", "meanSIS"]].mean()
    aggregated.insert(0, "count", grouped.size())
    aggregated = aggregated.reset_index()
    aggregated["count"] = aggregated["count"].astype(int)
    return aggregated[list(BRAND_AGG_COLUMNS)]


def breakdown_columns(column: str) -> list[str]:
    return [column, "count", *_BREAKDOWN_MEANS]


def aggregate_by(scored: pd.DataFrame, column: str) -> pd.DataFrame:
    """One row per value of ``column`` with its record count and mean SIS, price and footprints.

    Blank text values are grouped under ``"Unknown"``. Rows are ordered by
    mean SIS (highest first), except ``Market_Trend`` which is ordered by
    count and ``Year`` which is chronological. Records without a year are
    left out of the ``Year`` breakdown. A frame lacking ``column`` gives an
    empty result.
    """

    columns = breakdown_columns(column)
    if scored.empty or column not in scored.columns:
        return pd.DataFrame(columns=columns)

    if column == YEAR:
        years = pd.to_numeric(scored[YEAR], errors="coerce")
        frame = scored.loc[years.notna()]
        keys = years.loc[frame.index].astype(int)
    else:
        frame = scored
        text = scored[column].fillna("").astype(str).str.strip()
        keys = text.where(text.ne(""), UNKNOWN_LABEL)
    if frame.empty:
        return pd.DataFrame(columns=columns)

    working = pd.DataFrame({column: keys})
    for target, source in _BREAKDOWN_MEANS.items():
        working[target] = _numeric_column(frame, source)

    grouped = working.groupby(column, sort=False)
    aggregated = grouped[list(_BREAKDOWN_MEANS)].mean()
    aggregated.insert(0, "count", grouped.size())
    aggregated = aggregated.reset_index()
    aggregated["count"] = aggregated["count"].astype(int)

    if column == YEAR:
        aggregated = aggregated.sort_values(YEAR, kind="mergesort")
    elif column == MARKET_TREND:
        aggregated = aggregated.sort_values("count", ascending=False, kind="mergesort")
    else:
        aggregated = aggregated.sort_values("meanSIS", ascending=False, kind="mergesort")
    return aggregated.reset_index(drop=True)[columns]


def _empty_scored(records: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    scored = records.copy()
    for column in columns:
        scored[norm_column(column)] = pd.Series(dtype=float)
    for column in (ENV_SCORE, POLICY_SCORE, ENV_SCORE_NORM, POLICY_SCORE_NORM, SIS):
        scored[column] = pd.Series(dtype=float)
    return scored


def compute_sis(records: pd.DataFrame, config: AnalysisConfig | None = None) -> SISResult:
    """Score every record and aggregate the batch.

    ``records`` may be raw (strings, letter ratings, yes/no flags) or already
    prepared by :func:`~sustaingraph.modules.io.load_records`; the frame
    passed in is never modified.
    """

    config = config or AnalysisConfig()
    env_columns = list(config.indicator_columns.environmental)
    policy_columns = list(config.indicator_columns.policy)
    indicator_columns = list(dict.fromkeys(env_columns + policy_columns))

    if records is None or records.empty:
        base = records.copy() if records is not None else pd.DataFrame()
        return SISResult(
            scored=_empty_scored(base, indicator_columns),
            stats=Stats(),
            material_agg=aggregate_by_material(pd.DataFrame()),
            weights=EntropyWeights(),
        )

    prepared = prepare_records(records)
    scored = normalize(prepared, indicator_columns)

    env_matrix = 1.0 - scored[[norm_column(column) for column in env_columns]].to_numpy(dtype=float)
    policy_matrix = scored[[norm_column(column) for column in policy_columns]].to_numpy(dtype=float)
    weights = compute_entropy_weights({ENV_GROUP: env_matrix, POLICY_GROUP: policy_matrix})

    env_scores = weights.env_scores
    policy_scores = weights.policy_scores
    scored[ENV_SCORE] = env_scores
    scored[POLICY_SCORE] = policy_scores
    scored[ENV_SCORE_NORM] = min_max(env_scores)[0]
    scored[POLICY_SCORE_NORM] = min_max(policy_scores)[0]
    sis = weights.w_env * env_scores + weights.w_policy * policy_scores
    scored[SIS] = np.clip(np.nan_to_num(sis, nan=0.0), 0.0, 1.0)

    LOGGER.info(
        "SIS computed for %d record(s): w_env=%.4f w_policy=%.4f",
        len(scored),
        weights.w_env,
        weights.w_policy,
    )

    return SISResult(
        scored=scored,
        stats=compute_stats(scored, env_columns),
        material_agg=aggregate_by_material(scored),
        weights=weights,
    )


__all__ = [
    "BRAND_AGG_COLUMNS",
    "BREAKDOWN_DIMENSIONS",
    "MATERIAL_AGG_COLUMNS",
    "SISResult",
    "Stats",
    "aggregate_by",
    "aggregate_by_brand",
    "aggregate_by_material",
    "breakdown_columns",
    "compute_sis",
    "compute_stats",
    "indicator_quality",
]
