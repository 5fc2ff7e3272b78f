from __future__ import annotations

import math

import numpy as np
import pytest

from sustaingraph.modules.entropy import (
    ENV_GROUP,
    POLICY_GROUP,
    EntropyWeights,
    column_entropy,
    compute_entropy_weights,
    group_scores,
    weights_from_entropy,
)


def test_uniform_column_has_full_entropy():
    entropy = column_entropy(np.array([[1.0], [1.0], [1.0], [1.0]]))

    assert entropy.tolist() == pytest.approx([1.0])


def test_single_record_defaults_to_full_entropy():
    assert column_entropy(np.array([[0.3, 0.9]])).tolist() == [1.0, 1.0]


def test_all_zero_column_is_treated_as_uniform():
    assert column_entropy(np.zeros((3, 1))).tolist() == pytest.approx([1.0])


def test_entropy_of_known_distribution():
    entropy = column_entropy(np.array([[1.0], [0.5], [0.0]]))

    expected = -(2 / 3 * math.log(2 / 3) + 1 / 3 * math.log(1 / 3)) / math.log(3)
    assert entropy[0] == pytest.approx(expected)


def test_weights_from_entropy_sum_to_one_and_favour_low_entropy():
    weights = weights_from_entropy([0.2, 0.8])

    assert weights.sum() == pytest.approx(1.0)
    assert weights[0] > weights[1]


def test_weights_from_entropy_degenerate_is_equal():
    assert weights_from_entropy([1.0, 1.0, 1.0]).tolist() == pytest.approx([1 / 3] * 3)


def test_group_scores_weighted_sum_is_clipped():
    scores = group_scores(np.array([[1.0, 1.0], [0.0, 0.5]]), [0.7, 0.3])

    assert scores.tolist() == pytest.approx([1.0, 0.15])


def test_compute_entropy_weights_sum_to_one():
    rng = np.random.default_rng(42)
    result = compute_entropy_weights(
        {ENV_GROUP: rng.uniform(0, 1, (50, 3)), POLICY_GROUP: rng.uniform(0, 1, (50, 2))}
    )

    assert result.w_env + result.w_policy == pytest.approx(1.0)
    assert 0.0 <= result.env_entropy <= 1.0
    assert 0.0 <= result.policy_entropy <= 1.0
    assert len(result.column_weights[ENV_GROUP]) == 3
    assert sum(result.column_weights[POLICY_GROUP]) == pytest.approx(1.0)
    assert result.env_scores.shape == (50,)


def test_compute_entropy_weights_degenerate_groups_split_evenly():
    constant = np.full((4, 2), 0.5)

    result = compute_entropy_weights({ENV_GROUP: constant, POLICY_GROUP: constant})

    assert (result.w_env, result.w_policy) == pytest.approx((0.5, 0.5))


def test_default_weights_and_serialisation():
    weights = EntropyWeights()

    payload = weights.to_dict()

    assert payload["wEnv"] == payload["wPolicy"] == 0.5
    assert payload["envDiversity"] == pytest.approx(0.0)
