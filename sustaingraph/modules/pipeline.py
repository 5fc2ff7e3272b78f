"""End-to-end analysis run: scoring, clustering, Pareto and recommendations.

:func:`run_analysis` is the single entry point used by the dashboard and the
CLI. After scoring, the clustering branch and the Pareto/recommendation
branch do not depend on each other and are submitted to an
:class:`~sustaingraph.modules.execution.ExecutionBackend`.
"""

from __future__ import annotations

import functools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import numpy as np
import pandas as pd

from .analytics import with_pareto_flags
from .clustering import ElbowResult, KMeansResult, choose_k_by_elbow, run_kmeans
from .config import AnalysisConfig
from .entropy import EntropyWeights
from .execution import ExecutionBackend, create_backend
from .ranking import Recommendations, build_recommendations
from .schema import IS_PARETO
from .scoring import BREAKDOWN_DIMENSIONS, Stats, aggregate_by, aggregate_by_brand, compute_sis

LOGGER = logging.getLogger(__name__)

CLUSTER_FEATURES: tuple[str, str] = ("meanEnvNorm", "meanPolicyNorm")
CLUSTER_COLUMN = "cluster"


@dataclass
class AnalysisState:
    """Everything one analysis run produces."""

    scored: pd.DataFrame
    stats: Stats
    weights: EntropyWeights
    material_agg: pd.DataFrame
    brand_agg: pd.DataFrame
    elbow: ElbowResult
    kmeans: KMeansResult
    material_pareto: pd.DataFrame
    brand_pareto: pd.DataFrame
    recommendations: Recommendations
    config: AnalysisConfig
    breakdowns: Dict[str, pd.DataFrame] = field(default_factory=dict)

    @property
    def record_count(self) -> int:
        return int(len(self.scored))

    @property
    def best_k(self) -> int:
        return self.elbow.best_k

    def summary(self) -> Dict[str, Any]:
        """Headline figures for logs and the CLI."""

        return {
            "records": self.record_count,
            "brands": self.stats.brand_count,
            "materials": int(len(self.material_agg)),
            "avgSIS": self.stats.avg_sis,
            "wEnv": self.weights.w_env,
            "wPolicy": self.weights.w_policy,
            "bestK": self.best_k,
            "paretoRecords": int(self.scored[IS_PARETO].sum()) if IS_PARETO in self.scored else 0,
        }


def cluster_materials(
    material_agg: pd.DataFrame,
    config: AnalysisConfig,
) -> Tuple[ElbowResult, KMeansResult, pd.DataFrame]:
    """Pick k on the material feature vectors and label every material."""

    settings = config.kmeans
    if material_agg.empty:
        features = np.zeros((0, len(CLUSTER_FEATURES)), dtype=float)
    else:
        features = material_agg.loc[:, list(CLUSTER_FEATURES)].to_numpy(dtype=float)

    elbow = choose_k_by_elbow(
        features,
        max_k=settings.max_k,
        max_iterations=settings.max_iterations,
        seed=settings.seed,
    )
    kmeans = elbow.runs.get(elbow.best_k)
    if kmeans is None:
        kmeans = run_kmeans(features, elbow.best_k, settings.max_iterations, seed=settings.seed)

    clustered = material_agg.copy()
    clustered[CLUSTER_COLUMN] = pd.Series(kmeans.assignments, index=clustered.index, dtype=int)
    return elbow, kmeans, clustered


def rank_frontiers(
    scored: pd.DataFrame,
    material_agg: pd.DataFrame,
    brand_agg: pd.DataFrame,
    config: AnalysisConfig,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame, Recommendations]:
    """Pareto flags on records and aggregates plus the recommendation lists."""

    flagged = with_pareto_flags(scored)
    material_pareto = with_pareto_flags(material_agg, "meanPrice", "meanSIS")
    brand_pareto = with_pareto_flags(brand_agg, "meanPrice", "meanSIS")
    recommendations = build_recommendations(scored, top_n=config.recommender.top_n)
    return flagged, material_pareto, brand_pareto, recommendations


def _backend_for(config: AnalysisConfig) -> ExecutionBackend:
    preferred = config.execution.backend
    return create_backend(2, preferred=None if preferred == "auto" else preferred)


def run_analysis(
    records: pd.DataFrame,
    config: AnalysisConfig | None = None,
    *,
    backend: ExecutionBackend | None = None,
) -> AnalysisState:
    """Run the complete analysis on ``records`` and return an :class:`AnalysisState`.

    ``records`` is left untouched. When ``backend`` is omitted one is created
    from ``config.execution.backend`` and shut down before returning.
    """

    config = config or AnalysisConfig()
    started = time.perf_counter()
    LOGGER.info("Analysis started for %d record(s)", 0 if records is None else len(records))

    sis = compute_sis(records, config)
    brand_agg = aggregate_by_brand(sis.scored)
    breakdowns = {
        dimension: aggregate_by(sis.scored, dimension) for dimension in BREAKDOWN_DIMENSIONS
    }

    owns_backend = backend is None
    executor = _backend_for(config) if backend is None else backend
    try:
        results = executor.run_branches(
            {
                "clusters": functools.partial(cluster_materials, sis.material_agg, config),
                "frontiers": functools.partial(
                    rank_frontiers, sis.scored, sis.material_agg, brand_agg, config
                ),
            }
        )
    finally:
        if owns_backend:
            executor.shutdown()

    elbow, kmeans, material_agg = results["clusters"]
    scored, material_pareto, brand_pareto, recommendations = results["frontiers"]

    material_pareto[CLUSTER_COLUMN] = material_agg[CLUSTER_COLUMN]

    state = AnalysisState(
        scored=scored,
        stats=sis.stats,
        weights=sis.weights,
        material_agg=material_agg,
        brand_agg=brand_agg,
        elbow=elbow,
        kmeans=kmeans,
        material_pareto=material_pareto,
        brand_pareto=brand_pareto,
        recommendations=recommendations,
        config=config,
        breakdowns=breakdowns,
    )
    LOGGER.info(
        "Analysis finished in %.3fs: %d record(s), %d material(s), k=%d",
        time.perf_counter() - started,
        state.record_count,
        len(material_agg),
        elbow.best_k,
    )
    return state


__all__ = [
    "AnalysisState",
    "CLUSTER_COLUMN",
    "CLUSTER_FEATURES",
    "cluster_materials",
    "rank_frontiers",
    "run_analysis",
]
