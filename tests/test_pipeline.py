from __future__ import annotations

import pandas as pd
import pytest

from sustaingraph.modules.config import AnalysisConfig
from sustaingraph.modules.execution import SynchronousBackend, ThreadPoolBackend
from sustaingraph.modules.io import load_records
from sustaingraph.modules.pipeline import run_analysis
from sustaingraph.modules.scoring import BREAKDOWN_DIMENSIONS


def test_cotton_end_to_end(cotton_records):
    state = run_analysis(cotton_records)

    assert state.scored["SIS"].tolist() == pytest.approx([1.0, 0.3869, 0.2263], abs=1e-3)
    assert state.scored["isPareto"].tolist() == [True, False, False]
    assert state.elbow.best_k == 1
    assert state.material_agg["cluster"].tolist() == [0]
    for frame in state.recommendations.categories().values():
        assert frame["Brand_Name"].tolist() == ["Alpha"]


def test_pipeline_on_bundled_dataset():
    records = load_records()

    state = run_analysis(records)

    assert state.record_count == len(records)
    materials = state.material_agg
    assert materials["count"].sum() == len(records)
    assert materials["cluster"].between(0, state.best_k - 1).all()
    assert 1 <= state.best_k <= AnalysisConfig().kmeans.max_k
    assert state.brand_pareto["isPareto"].any()
    assert state.material_pareto["cluster"].tolist() == materials["cluster"].tolist()
    assert len(state.recommendations.max_sustainability) <= 5


def test_thread_backend_gives_identical_results(brand_records):
    with SynchronousBackend() as sync_backend:
        sequential = run_analysis(brand_records, backend=sync_backend)
    with ThreadPoolBackend(max_workers=2) as thread_backend:
        threaded = run_analysis(brand_records, backend=thread_backend)

    pd.testing.assert_frame_equal(sequential.scored, threaded.scored)
    pd.testing.assert_frame_equal(sequential.material_agg, threaded.material_agg)
    assert sequential.elbow.curve == threaded.elbow.curve


def test_runs_are_independent(brand_records):
    first = run_analysis(brand_records)
    second = run_analysis(brand_records)

    assert first.elbow.curve == second.elbow.curve
    assert first.summary() == second.summary()


def test_config_drives_k_and_top_n(brand_records):
    config = AnalysisConfig.from_mapping({"kmeans": {"maxK": 2}, "recommender": {"topN": 1}})

    state = run_analysis(brand_records, config)

    assert len(state.elbow.curve) == 2
    for frame in state.recommendations.categories().values():
        assert len(frame) <= 1


def test_breakdowns_cover_every_dimension(brand_records):
    state = run_analysis(brand_records)

    assert list(state.breakdowns) == list(BREAKDOWN_DIMENSIONS)
    assert state.breakdowns["Material_Type"]["count"].sum() == 12
    assert state.breakdowns["Market_Trend"]["Market_Trend"].tolist() == ["Stable", "Growing"]


def test_empty_records_produce_empty_state():
    state = run_analysis(pd.DataFrame())

    assert state.record_count == 0
    assert state.elbow.best_k == 1
    assert state.material_agg.empty
    assert state.recommendations.is_empty()
    assert (state.weights.w_env, state.weights.w_policy) == (0.5, 0.5)


def test_run_logs_start_and_finish(cotton_records, caplog):
    with caplog.at_level("INFO", logger="sustaingraph.modules.pipeline"):
        run_analysis(cotton_records)

    messages = [record.getMessage() for record in caplog.records]
    assert any("Analysis started for 3 record(s)" in message for message in messages)
    assert any("Analysis finished" in message for message in messages)
