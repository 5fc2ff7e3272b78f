"""K-means clustering of material feature vectors and elbow-based k selection.

Both helpers operate on plain ``n x d`` arrays; the pipeline feeds them the
``[meanEnvNorm, meanPolicyNorm]`` pair of every material aggregate. Results
are deterministic for a given ``seed``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError, InvalidClusterCountError

LOGGER = logging.getLogger(__name__)


@dataclass
class KMeansResult:
    centroids: np.ndarray
    assignments: np.ndarray
    inertia: float = 0.0
    iterations: int = 0
    converged: bool = True

    @property
    def k(self) -> int:
        return int(self.centroids.shape[0])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "k": self.k,
            "centroids": self.centroids.tolist(),
            "assignments": [int(value) for value in self.assignments],
            "inertia": float(self.inertia),
            "iterations": int(self.iterations),
            "converged": bool(self.converged),
        }


@dataclass
class ElbowResult:
    """Inertia curve for k = 1..K and the selected elbow."""

    best_k: int
    curve: List[Tuple[int, float]]
    runs: Dict[int, KMeansResult] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bestK": self.best_k,
            "curve": [{"k": k, "inertia": inertia} for k, inertia in self.curve],
        }


def _as_points(vectors: Any) -> np.ndarray:
    points = np.asarray(vectors, dtype=float)
    if points.size == 0:
        width = points.shape[1] if points.ndim == 2 else 0
        return np.zeros((0, width), dtype=float)
    if points.ndim == 1:
        points = points.reshape(-1, 1)
    return np.nan_to_num(points, nan=0.0, posinf=0.0, neginf=0.0)


def _squared_distances(points: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    diff = points[:, None, :] - centroids[None, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def kmeans_plus_plus(points: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """Pick ``k`` initial centroids with D² sampling.

    Once every remaining point coincides with a chosen centroid the rest are
    drawn uniformly from the unused indices.
    """

    n_points = points.shape[0]
    chosen = [int(rng.integers(n_points))]
    closest = _squared_distances(points, points[chosen]).min(axis=1)
    while len(chosen) < k:
        weights = closest.copy()
        weights[chosen] = 0.0
        total = float(weights.sum())
        if total > 0.0:
            index = int(rng.choice(n_points, p=weights / total))
        else:
            unused = np.setdiff1d(np.arange(n_points), chosen)
            index = int(rng.choice(unused))
        chosen.append(index)
        closest = np.minimum(closest, _squared_distances(points, points[[index]])[:, 0])
    return points[chosen].copy()


def _lloyd(
    points: np.ndarray,
    centroids: np.ndarray,
    max_iterations: int,
) -> KMeansResult:
    centroids = centroids.copy()
    assignments: np.ndarray | None = None
    converged = False
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        labels = _squared_distances(points, centroids).argmin(axis=1)
        if assignments is not None and np.array_equal(labels, assignments):
            converged = True
            break
        assignments = labels
        for cluster in range(centroids.shape[0]):
            members = points[assignments == cluster]
            if len(members):
                centroids[cluster] = members.mean(axis=0)

    residuals = points - centroids[assignments]
    inertia = float(np.einsum("ij,ij->", residuals, residuals))
    return KMeansResult(
        centroids=centroids,
        assignments=assignments.astype(int),
        inertia=inertia,
        iterations=iterations,
        converged=converged,
    )


def run_kmeans(
    vectors: Sequence[Sequence[float]] | np.ndarray,
    k: int,
    max_iterations: int = 40,
    *,
    seed: int = 0,
    initial_centroids: Sequence[Sequence[float]] | np.ndarray | None = None,
) -> KMeansResult:
    """Cluster ``vectors`` into at most ``k`` groups with Lloyd's algorithm.

    ``k`` larger than the number of points is clamped, and
    ``initial_centroids`` must supply exactly that many rows. Empty clusters keep
    their previous centroid. Hitting ``max_iterations`` is reported through
    ``converged=False`` rather than raised.
    """

    if isinstance(k, bool) or int(k) != k or k <= 0:
        raise InvalidClusterCountError(k)
    if max_iterations <= 0:
        raise ConfigurationError(f"max_iterations must be positive, got {max_iterations!r}")

    points = _as_points(vectors)
    n_points = points.shape[0]
    if n_points == 0:
        return KMeansResult(
            centroids=np.zeros((0, points.shape[1]), dtype=float),
            assignments=np.zeros(0, dtype=int),
        )

    if initial_centroids is not None:
        centroids = _as_points(initial_centroids)
        if centroids.shape[0] == 0 or centroids.shape[1] != points.shape[1]:
            raise ConfigurationError("initial_centroids must match the dimensionality of the vectors")
        expected = min(int(k), n_points)
        if centroids.shape[0] != expected:
            raise ConfigurationError(
                f"initial_centroids has {centroids.shape[0]} row(s) but k={k} needs {expected}"
            )
    else:
        centroids = kmeans_plus_plus(points, min(int(k), n_points), np.random.default_rng(seed))

    result = _lloyd(points, centroids, max_iterations)
    LOGGER.debug(
        "k-means k=%d finished after %d iteration(s), converged=%s, inertia=%.6f",
        result.k,
        result.iterations,
        result.converged,
        result.inertia,
    )
    return result


def _next_centroids(points: np.ndarray, result: KMeansResult) -> np.ndarray:
    residuals = points - result.centroids[result.assignments]
    farthest = int(np.einsum("ij,ij->i", residuals, residuals).argmax())
    return np.vstack([result.centroids, points[farthest]])


def _select_elbow(curve: Sequence[Tuple[int, float]]) -> int:
    if len(curve) <= 1:
        return 1
    inertias = [inertia for _, inertia in curve]
    if inertias[0] <= 0.0:
        return 1
    if len(curve) == 2:
        return 2 if inertias[1] < inertias[0] else 1

    best_k = curve[1][0]
    best_score = -np.inf
    for position in range(1, len(curve) - 1):
        score = inertias[position - 1] - 2.0 * inertias[position] + inertias[position + 1]
        if score > best_score:
            best_score = score
            best_k = curve[position][0]
    return best_k


def choose_k_by_elbow(
    vectors: Sequence[Sequence[float]] | np.ndarray,
    max_k: int = 6,
    max_iterations: int = 40,
    *,
    seed: int = 0,
) -> ElbowResult:
    """Run k-means for k = 1..max_k and pick k at the elbow of the inertia curve.

    Every k after the first starts from the previous centroids plus the point
    farthest from its centroid, so the curve never increases. The elbow is
    the interior k with the largest second difference
    ``I(k-1) - 2 I(k) + I(k+1)``; ties go to the smallest k.
    """

    if max_k <= 0:
        raise InvalidClusterCountError(max_k)

    points = _as_points(vectors)
    n_points = points.shape[0]
    if n_points < 2:
        result = run_kmeans(points, 1, max_iterations, seed=seed)
        return ElbowResult(best_k=1, curve=[(1, result.inertia)], runs={1: result})

    k_limit = min(int(max_k), n_points)
    runs: Dict[int, KMeansResult] = {}
    curve: List[Tuple[int, float]] = []
    previous: KMeansResult | None = None
    for k in range(1, k_limit + 1):
        if previous is None:
            result = run_kmeans(points, k, max_iterations, seed=seed)
        else:
            result = run_kmeans(
                points,
                k,
                max_iterations,
                initial_centroids=_next_centroids(points, previous),
            )
        runs[k] = result
        curve.append((k, result.inertia))
        LOGGER.debug("Elbow k=%d inertia=%.6f", k, result.inertia)
        previous = result

    best_k = _select_elbow(curve)
    LOGGER.debug("Elbow selected k=%d from %d candidate(s)", best_k, len(curve))
    return ElbowResult(best_k=best_k, curve=curve, runs=runs)


__all__ = [
    "ElbowResult",
    "KMeansResult",
    "choose_k_by_elbow",
    "kmeans_plus_plus",
    "run_kmeans",
]
