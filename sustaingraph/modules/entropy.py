"""Entropy weight method for the environmental and policy indicator groups.

Each group is a ``rows x columns`` matrix of normalized, benefit-oriented
indicators (higher is better). Column entropies decide how much each
indicator contributes to its group score, and the mean entropy of each group
decides how the two group scores are blended into the final SIS. Columns
with less entropy (more spread across records) carry more information and
therefore receive larger weights.

The helpers never let ``NaN`` escape: invalid inputs degrade to equal
weighting.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence

import numpy as np

LOGGER = logging.getLogger(__name__)

ENV_GROUP = "env"
POLICY_GROUP = "policy"

__all__ = [
    "ENV_GROUP",
    "POLICY_GROUP",
    "EntropyWeights",
    "column_entropy",
    "weights_from_entropy",
    "group_scores",
    "compute_entropy_weights",
]


@dataclass(frozen=True)
class EntropyWeights:
    """Objective weights derived from the indicator entropies."""

    w_env: float = 0.5
    w_policy: float = 0.5
    env_entropy: float = 1.0
    policy_entropy: float = 1.0
    column_entropy: Dict[str, tuple[float, ...]] = field(default_factory=dict)
    column_weights: Dict[str, tuple[float, ...]] = field(default_factory=dict)
    env_scores: np.ndarray = field(default_factory=lambda: np.empty(0), repr=False, compare=False)
    policy_scores: np.ndarray = field(default_factory=lambda: np.empty(0), repr=False, compare=False)

    @property
    def env_diversity(self) -> float:
        return 1.0 - self.env_entropy

    @property
    def policy_diversity(self) -> float:
        return 1.0 - self.policy_entropy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wEnv": self.w_env,
            "wPolicy": self.w_policy,
            "envEntropy": self.env_entropy,
            "policyEntropy": self.policy_entropy,
            "envDiversity": self.env_diversity,
            "policyDiversity": self.policy_diversity,
            "columnEntropy": {key: list(value) for key, value in self.column_entropy.items()},
            "columnWeights": {key: list(value) for key, value in self.column_weights.items()},
        }


def _as_matrix(values: Any) -> np.ndarray:
    matrix = np.asarray(values, dtype=float)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    if matrix.ndim != 2:
        return np.zeros((0, 0), dtype=float)
    # Negative or non-finite cells carry no mass in the proportion step.
    return np.where(np.isfinite(matrix) & (matrix > 0.0), matrix, 0.0)


def column_entropy(matrix: Any) -> np.ndarray:
    """Return the normalized Shannon entropy of every column in ``[0, 1]``."""

    data = _as_matrix(matrix)
    n_rows, n_cols = data.shape
    if n_cols == 0:
        return np.empty(0, dtype=float)
    if n_rows <= 1:
        return np.ones(n_cols, dtype=float)

    sums = data.sum(axis=0)
    safe_sums = np.where(sums > 0.0, sums, 1.0)
    proportions = np.where(sums > 0.0, data / safe_sums, 1.0 / n_rows)

    logs = np.log(proportions, out=np.zeros_like(proportions), where=proportions > 0.0)
    entropy = -(proportions * logs).sum(axis=0) / math.log(n_rows)
    entropy = np.nan_to_num(entropy, nan=1.0, posinf=1.0, neginf=0.0)
    return np.clip(entropy, 0.0, 1.0)


def weights_from_entropy(entropy: Sequence[float] | np.ndarray) -> np.ndarray:
    """Turn entropies into weights proportional to ``1 - e``, summing to 1."""

    values = np.asarray(entropy, dtype=float)
    if values.size == 0:
        return np.empty(0, dtype=float)
    diversity = 1.0 - np.clip(np.nan_to_num(values, nan=1.0), 0.0, 1.0)
    total = float(diversity.sum())
    if not math.isfinite(total) or total <= 0.0:
        return np.full(values.shape, 1.0 / values.size)
    return diversity / total


def group_scores(matrix: Any, weights: Sequence[float] | np.ndarray) -> np.ndarray:
    """Weighted sum of a group's columns for every record."""

    data = np.asarray(matrix, dtype=float)
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    weight_vector = np.asarray(weights, dtype=float)
    if data.size == 0 or weight_vector.size == 0:
        return np.zeros(data.shape[0] if data.ndim == 2 else 0, dtype=float)
    data = np.nan_to_num(data, nan=0.0, posinf=0.0, neginf=0.0)
    return np.clip(data @ weight_vector, 0.0, 1.0)


def compute_entropy_weights(normalized_groups: Mapping[str, Any]) -> EntropyWeights:
    """Compute column weights, group scores and the two group weights.

    ``normalized_groups`` maps ``"env"`` and ``"policy"`` to ``rows x columns``
    matrices of normalized values. Missing groups are treated as empty.
    """

    column_entropies: Dict[str, tuple[float, ...]] = {}
    column_weight_map: Dict[str, tuple[float, ...]] = {}
    scores: Dict[str, np.ndarray] = {}
    group_entropy: Dict[str, float] = {}

    for group in (ENV_GROUP, POLICY_GROUP):
        raw = normalized_groups.get(group)
        matrix = np.asarray(raw if raw is not None else np.zeros((0, 0)), dtype=float)
        if matrix.ndim == 1:
            matrix = matrix.reshape(-1, 1)
        entropy = column_entropy(matrix)
        weights = weights_from_entropy(entropy)
        column_entropies[group] = tuple(float(value) for value in entropy)
        column_weight_map[group] = tuple(float(value) for value in weights)
        scores[group] = group_scores(matrix, weights)
        group_entropy[group] = float(entropy.mean()) if entropy.size else 1.0

    w_env, w_policy = (
        float(value)
        for value in weights_from_entropy([group_entropy[ENV_GROUP], group_entropy[POLICY_GROUP]])
    )

    result = EntropyWeights(
        w_env=w_env,
        w_policy=w_policy,
        env_entropy=group_entropy[ENV_GROUP],
        policy_entropy=group_entropy[POLICY_GROUP],
        column_entropy=column_entropies,
        column_weights=column_weight_map,
        env_scores=scores[ENV_GROUP],
        policy_scores=scores[POLICY_GROUP],
    )
    LOGGER.debug(
        "Entropy weights computed: env=%.4f policy=%.4f (entropy env=%.4f policy=%.4f)",
        result.w_env,
        result.w_policy,
        result.env_entropy,
        result.policy_entropy,
    )
    return result
