import pandas as pd
import pytest

from sustaingraph.modules.config import AnalysisConfig
from sustaingraph.modules.page_data import (
    build_data_quality_table,
    build_recommendation_table,
    build_weights_table,
)
from sustaingraph.modules.pipeline import run_analysis


def test_weights_table_lists_every_indicator(cotton_records):
    state = run_analysis(cotton_records)

    df = build_weights_table(state.weights, state.config)

    config = AnalysisConfig()
    expected_rows = len(config.indicator_columns.environmental) + len(config.indicator_columns.policy)
    assert len(df) == expected_rows
    assert set(df["Group"]) == {"Environmental", "Policy"}
    for group in ("Environmental", "Policy"):
        assert df.loc[df["Group"] == group, "Weight in group"].sum() == pytest.approx(1.0)


def test_data_quality_table_uses_population_variance(cotton_records):
    state = run_analysis(cotton_records)

    df = build_data_quality_table(state.stats)

    assert list(df.columns) == ["Indicator", "Min", "Max", "Variance", "CV"]
    carbon = df.iloc[0]
    assert carbon["Min"] == pytest.approx(10.0)
    assert carbon["Max"] == pytest.approx(30.0)
    assert carbon["Variance"] == pytest.approx(200.0 / 3.0)


def test_recommendation_table_ranks_rows(brand_records):
    state = run_analysis(brand_records)

    table = build_recommendation_table(state.recommendations.balanced)

    assert table["Rank"].tolist() == list(range(1, len(table) + 1))
    assert len(table.columns) >= 3


def test_recommendation_table_handles_empty_frame():
    frame = pd.DataFrame(columns=["Brand_Name", "Material_Type", "Average_Price_USD", "SIS"])

    table = build_recommendation_table(frame)

    assert table.empty
    assert table.columns[0] == "Rank"
