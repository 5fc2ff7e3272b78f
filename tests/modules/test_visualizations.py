import altair as alt
import pandas as pd

from sustaingraph.modules.clustering import ElbowResult
from sustaingraph.modules.visualizations import (
    BreakdownScene,
    ClusterScene,
    ElbowScene,
    cluster_interpretation,
    describe_breakdown,
    describe_cluster,
    elbow_frame,
)


class DummyTarget:
    def __init__(self) -> None:
        self.infos: list[str] = []

    def info(self, message: str) -> None:  # pragma: no cover - simple collector
        self.infos.append(message)


def _material_agg() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Material_Type": ["Cotton", "Hemp", "Polyester", "Wool"],
            "count": [3, 2, 4, 1],
            "meanPrice": [20.0, 35.0, 12.0, 80.0],
            "meanSIS": [0.7, 0.8, 0.2, 0.4],
            "meanEnvNorm": [0.8, 0.9, 0.1, 0.3],
            "meanPolicyNorm": [0.6, 0.7, 0.2, 0.3],
            "cluster": [0, 0, 1, 1],
        }
    )


def test_elbow_scene_render_handles_missing_curve():
    scene = ElbowScene(ElbowResult(best_k=0, curve=[]))
    target = DummyTarget()

    scene.render(container=target)

    assert target.infos == ["No clustering results yet. Run the analysis first."]


def test_cluster_scene_render_handles_empty_aggregates():
    scene = ClusterScene(pd.DataFrame())
    target = DummyTarget()

    scene.render(container=target)

    assert target.infos == ["No materials to cluster with the current filters."]


def test_elbow_frame_marks_selected_k():
    elbow = ElbowResult(best_k=2, curve=[(1, 4.0), (2, 1.0), (3, 0.8)])

    frame = elbow_frame(elbow)

    assert frame["selected"].tolist() == [False, True, False]
    assert isinstance(ElbowScene(elbow).build_chart(), alt.LayerChart)


def test_cluster_interpretation_groups_materials():
    table = cluster_interpretation(_material_agg())

    assert table["cluster"].tolist() == [0, 1]
    assert table.loc[0, "materials"] == "Cotton, Hemp"
    assert table.loc[1, "count"] == 2
    assert table.loc[0, "profile"] == "strong environmental profile, strong policy"
    assert table.loc[1, "profile"] == "weak environmental profile, weak policy"


def test_cluster_interpretation_without_clusters():
    table = cluster_interpretation(_material_agg().drop(columns=["cluster"]))

    assert table.empty
    assert "profile" in table.columns


def test_describe_cluster_threshold():
    assert describe_cluster(0.5, 0.49) == "strong environmental profile, weak policy"


def test_cluster_scene_chart_encodes_cluster_colour():
    chart = ClusterScene(_material_agg()).build_chart()

    encoded = chart.to_dict()
    assert encoded["encoding"]["color"]["field"] == "cluster"


def _country_breakdown() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Country": ["Japan", "France", "USA"],
            "count": [2, 5, 1],
            "meanSIS": [0.8, 0.6, 0.3],
            "meanPrice": [40.0, 95.5, 20.0],
            "meanCarbon": [10.0, 12.0, 30.0],
            "meanWater": [100.0, 120.0, 300.0],
            "meanWaste": [5.0, 6.0, 9.0],
        }
    )


def test_breakdown_scene_render_handles_empty_table():
    scene = BreakdownScene(pd.DataFrame(), "Country")
    target = DummyTarget()

    scene.render(container=target)

    assert target.infos == ["No country data in the current dataset."]


def test_breakdown_scene_layers_price_bars_with_sis():
    scene = BreakdownScene(_country_breakdown(), "Country", top_n=2)

    assert isinstance(scene.build_chart(), alt.LayerChart)
    assert scene.chart_frame()["Country"].tolist() == ["Japan", "France"]


def test_breakdown_scene_keeps_every_year():
    years = pd.DataFrame(
        {
            "Year": [2019 + i for i in range(12)],
            "count": [1] * 12,
            "meanSIS": [0.5] * 12,
            "meanPrice": [10.0] * 12,
        }
    )

    scene = BreakdownScene(years, "Year")

    assert scene.chart_frame()["Year"].tolist() == [str(2019 + i) for i in range(12)]


def test_describe_breakdown_names_highest_sis_and_price():
    lines = describe_breakdown(_country_breakdown(), "Country")

    assert lines == [
        "**Japan** has the highest mean SIS among country groups (0.800).",
        "**France** has the highest mean price ($95.50).",
    ]


def test_describe_breakdown_for_trends_names_most_common():
    trends = pd.DataFrame(
        {
            "Market_Trend": ["Growing", "Stable"],
            "count": [7, 3],
            "meanSIS": [0.4, 0.7],
            "meanPrice": [50.0, 30.0],
        }
    )

    lines = describe_breakdown(trends, "Market_Trend")

    assert lines[0].startswith("**Stable** has the highest mean SIS")
    assert lines[1] == "**Growing** is the most common trend (7 record(s))."


def test_describe_breakdown_empty():
    assert describe_breakdown(pd.DataFrame(), "Year") == []
