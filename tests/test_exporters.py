from __future__ import annotations

import io
import json

import pandas as pd
import pytest

from sustaingraph.modules.exporters import (
    recommendations_to_csv,
    recommendations_to_frame,
    scored_to_csv,
    state_to_json,
)
from sustaingraph.modules.pipeline import run_analysis


def test_state_to_json_round_trips_key_sections(brand_records):
    state = run_analysis(brand_records)

    payload = json.loads(state_to_json(state).decode("utf-8"))

    assert payload["summary"]["records"] == 12
    assert payload["entropyWeights"]["wEnv"] + payload["entropyWeights"]["wPolicy"] == pytest.approx(1.0)
    assert payload["elbow"]["bestK"] == state.best_k
    assert len(payload["records"]) == 12
    assert set(payload["recommendations"]) == {"maxSustainability", "bestValue", "balanced"}
    assert payload["config"]["kmeans"]["max_k"] == 6
    assert "DATA_QUALITY" in payload["stats"]


def test_state_to_json_can_skip_records(cotton_records):
    state = run_analysis(cotton_records)

    payload = json.loads(state_to_json(state, include_records=False))

    assert "records" not in payload
    assert payload["materialAgg"][0]["Material_Type"] == "Cotton"


def test_state_to_json_writes_nan_as_null():
    records = pd.DataFrame(
        {
            "Material_Type": ["Silk", "Silk"],
            "Carbon_Footprint_MT": ["n/a", "3"],
            "Water_Usage_Liters": [1, 2],
            "Waste_Production_KG": [1, 2],
            "Average_Price_USD": [10, 20],
        }
    )

    payload = json.loads(state_to_json(run_analysis(records)))

    assert payload["records"][0]["Carbon_Footprint_MT"] is None


def test_recommendations_csv_has_category_column(brand_records):
    state = run_analysis(brand_records)

    frame = pd.read_csv(io.BytesIO(recommendations_to_csv(state.recommendations)))

    assert frame.columns[0] == "category"
    assert set(frame["category"]) <= {"maxSustainability", "bestValue", "balanced"}
    assert len(frame) == sum(len(f) for f in state.recommendations.categories().values())


def test_empty_recommendations_frame(cotton_records):
    state = run_analysis(cotton_records.iloc[0:0])

    assert list(recommendations_to_frame(state.recommendations).columns) == ["category"]


def test_scored_to_csv(cotton_records):
    data = scored_to_csv(run_analysis(cotton_records).scored)

    assert data.decode("utf-8").splitlines()[0].startswith("Brand_ID,Brand_Name")


def test_state_to_json_includes_breakdowns(cotton_records):
    state = run_analysis(cotton_records)

    breakdowns = json.loads(state_to_json(state, include_records=False))["breakdowns"]

    assert set(breakdowns) == {"Material_Type", "Country", "Market_Trend", "Year"}
    assert breakdowns["Material_Type"][0]["count"] == 3
    assert breakdowns["Country"][0]["Country"] == "Unknown"
    assert breakdowns["Year"] == []
