from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from sustaingraph.modules.errors import ConfigurationError
from sustaingraph.modules.ranking import build_recommendations


def _scored(prices, scores) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Brand_Name": [f"Brand_{i}" for i in range(len(prices))],
            "Average_Price_USD": prices,
            "SIS": scores,
        }
    )


def test_lists_are_drawn_from_the_pareto_set():
    scored = _scored([10, 20, 15, 30, 5], [0.6, 0.9, 0.5, 0.95, 0.2])

    recs = build_recommendations(scored, top_n=5)

    pareto_names = {"Brand_0", "Brand_1", "Brand_3", "Brand_4"}
    for frame in recs.categories().values():
        assert set(frame["Brand_Name"]).issubset(pareto_names)
        assert frame["isPareto"].all()
        assert len(frame) == 4


def test_orderings_per_category():
    scored = _scored([10, 20, 30, 5], [0.6, 0.9, 0.95, 0.2])

    recs = build_recommendations(scored, top_n=2)

    assert recs.max_sustainability["Brand_Name"].tolist() == ["Brand_2", "Brand_1"]
    assert recs.best_value["Brand_Name"].tolist() == ["Brand_3", "Brand_0"]
    assert len(recs.balanced) == 2


def test_balanced_prefers_point_closest_to_ideal():
    scored = _scored([0.0, 50.0, 100.0], [0.0, 0.9, 1.0])

    recs = build_recommendations(scored, top_n=3)

    balanced = recs.balanced
    assert balanced["Brand_Name"].iloc[0] == "Brand_1"
    top = balanced.iloc[0]
    assert top["distanceToIdeal"] == pytest.approx(math.hypot(0.5, 0.1))
    assert top["balanceScore"] == pytest.approx(1 - math.hypot(0.5, 0.1) / math.sqrt(2))
    assert balanced["balanceScore"].between(0.0, 1.0).all()


def test_ties_break_on_secondary_key():
    scored = _scored([20, 10, 10], [0.9, 0.9, 0.5])

    recs = build_recommendations(scored, top_n=3)

    assert recs.max_sustainability["Brand_Name"].tolist() == ["Brand_1"]
    assert recs.best_value["Brand_Name"].tolist() == ["Brand_1"]


def test_random_batches_respect_length_and_containment():
    rng = np.random.default_rng(42)
    scored = _scored(rng.uniform(5, 500, 120), rng.uniform(0, 1, 120))

    recs = build_recommendations(scored, top_n=3)

    for frame in recs.categories().values():
        assert len(frame) <= 3
        assert frame["isPareto"].all()


def test_empty_input_gives_three_empty_lists():
    recs = build_recommendations(_scored([], []), top_n=5)

    assert recs.is_empty()
    assert recs.to_dict() == {"maxSustainability": [], "bestValue": [], "balanced": []}


@pytest.mark.parametrize("top_n", [0, -1, 2.5, "three"])
def test_invalid_top_n_raises(top_n):
    with pytest.raises(ConfigurationError):
        build_recommendations(_scored([10], [0.5]), top_n=top_n)
