from pathlib import Path
import sys

if __package__ in {None, ""}:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)

from sustaingraph.bootstrap import ensure_streamlit_entrypoint

_PROJECT_ROOT = ensure_streamlit_entrypoint(__file__)

__doc__ = """Streamlit entrypoint: load records, filter them and run the analysis."""

import pandas as pd
import streamlit as st

from sustaingraph.modules.charts import weights_chart
from sustaingraph.modules.config import load_config
from sustaingraph.modules.errors import AnalysisError, MissingDatasetError
from sustaingraph.modules.exporters import scored_to_csv, state_to_json
from sustaingraph.modules.io import (
    RecordFilters,
    apply_filters,
    filter_options,
    format_missing_dataset_message,
    load_records,
)
from sustaingraph.modules.page_data import (
    ANALYSIS_STATE_KEY,
    build_data_quality_table,
    build_weights_table,
)
from sustaingraph.modules.pipeline import run_analysis
from sustaingraph.modules.schema import (
    BRAND_NAME,
    CERTIFICATIONS,
    COUNTRY,
    MARKET_TREND,
    MATERIAL,
    PRICE,
    SIS,
    YEAR,
)
from sustaingraph.modules.utils import format_number, format_weight

st.set_page_config(page_title="SustainGraph", page_icon="🌿", layout="wide")


def _load_dataset() -> pd.DataFrame:
    uploaded = st.sidebar.file_uploader("Brand records (CSV)", type=["csv"])
    try:
        if uploaded is not None:
            return load_records(uploaded.getvalue())
        return load_records()
    except MissingDatasetError as error:
        st.error(format_missing_dataset_message(error))
        st.stop()
    except AnalysisError as error:
        st.error(str(error))
        st.stop()


def _sidebar_filters(records: pd.DataFrame) -> RecordFilters:
    options = filter_options(records)
    st.sidebar.header("Filters")
    countries = st.sidebar.multiselect("Country", options[COUNTRY])
    materials = st.sidebar.multiselect("Material", options[MATERIAL])
    certifications = st.sidebar.multiselect("Certification", options[CERTIFICATIONS])
    trends = st.sidebar.multiselect("Market trend", options[MARKET_TREND])

    year_range = None
    years = options[YEAR]
    if years is not None and years[0] < years[1]:
        year_range = st.sidebar.slider("Year", min_value=years[0], max_value=years[1], value=years)

    return RecordFilters(
        countries=tuple(countries),
        materials=tuple(materials),
        certifications=tuple(certifications),
        market_trends=tuple(trends),
        year_range=tuple(year_range) if year_range is not None else None,
    )


def render_page() -> None:
    st.title("🌿 SustainGraph")
    st.caption(
        "Entropy-weighted Sustainability Index Score (SIS), material clusters and "
        "price/sustainability trade-offs for fashion brands."
    )

    records = _load_dataset()
    filters = _sidebar_filters(records)
    filtered = apply_filters(records, filters)
    st.write(f"**{len(filtered)}** of {len(records)} record(s) match the current filters.")

    if st.button("Run Analysis", key="run_analysis", type="primary"):
        try:
            config = load_config()
            st.session_state[ANALYSIS_STATE_KEY] = run_analysis(filtered, config)
        except AnalysisError as error:
            st.error(str(error))
            st.stop()

    state = st.session_state.get(ANALYSIS_STATE_KEY)
    if state is None:
        st.info("Press **Run Analysis** to score the filtered records.")
        return

    stats = state.stats
    metrics = [
        ("Brands", str(stats.brand_count)),
        ("Average SIS", format_number(stats.avg_sis, precision=3)),
        ("Average price (USD)", format_number(stats.avg_price)),
        ("Average carbon (MT)", format_number(stats.avg_carbon)),
        ("Average water (L)", format_number(stats.avg_water, precision=0)),
        ("Average waste (kg)", format_number(stats.avg_waste, precision=0)),
    ]
    for column, (label, value) in zip(st.columns(len(metrics)), metrics):
        column.metric(label, value)

    st.subheader("Entropy weights")
    col_chart, col_table = st.columns([1, 2])
    with col_chart:
        st.plotly_chart(weights_chart(state.weights.w_env, state.weights.w_policy), use_container_width=True)
        st.caption(
            f"Environmental {format_weight(state.weights.w_env)} · Policy {format_weight(state.weights.w_policy)}"
        )
    with col_table:
        st.dataframe(build_weights_table(state.weights, state.config), hide_index=True, use_container_width=True)

    st.subheader("Data quality")
    st.dataframe(build_data_quality_table(stats), hide_index=True, use_container_width=True)

    st.subheader("Scored records")
    visible = [column for column in (BRAND_NAME, MATERIAL, COUNTRY, PRICE, SIS, "isPareto") if column in state.scored]
    st.dataframe(
        state.scored.loc[:, visible].sort_values(SIS, ascending=False),
        hide_index=True,
        use_container_width=True,
    )

    col_json, col_csv = st.columns(2)
    col_json.download_button(
        "Download analysis (JSON)",
        data=state_to_json(state),
        file_name="sustaingraph_analysis.json",
        mime="application/json",
    )
    col_csv.download_button(
        "Download scored records (CSV)",
        data=scored_to_csv(state.scored),
        file_name="sustaingraph_scored.csv",
        mime="text/csv",
    )


if __name__ == "__main__":  # pragma: no cover - Streamlit entrypoint
    render_page()
