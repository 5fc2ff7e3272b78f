import sys
from pathlib import Path

if not __package__:
    repo_root = Path(__file__).resolve().parents[2]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)

from sustaingraph.bootstrap import ensure_streamlit_entrypoint

ensure_streamlit_entrypoint(__file__)

__doc__ = """Pareto frontiers over price and SIS plus the three recommendation lists."""

import streamlit as st

from sustaingraph.modules.charts import pareto_chart
from sustaingraph.modules.exporters import recommendations_to_csv, state_to_json
from sustaingraph.modules.page_data import ANALYSIS_STATE_KEY, build_recommendation_table
from sustaingraph.modules.schema import BRAND_NAME, IS_PARETO, MATERIAL, PRICE, SIS

st.set_page_config(page_title="Pareto & Recommendations", page_icon="📈", layout="wide")

state = st.session_state.get(ANALYSIS_STATE_KEY)
if state is None:
    st.warning("Run the analysis on the **Home** page first.")
    st.stop()

st.title("📈 Pareto & Recommendations")
st.caption(
    "A record is Pareto-optimal when no other record is both cheaper (or equal) "
    "and more sustainable (or equal), with at least one strict improvement."
)

col_material, col_brand = st.columns(2)
with col_material:
    st.plotly_chart(
        pareto_chart(
            state.material_pareto,
            price_col="meanPrice",
            score_col="meanSIS",
            label_col=MATERIAL,
            title="Materials: mean price vs. mean SIS",
        ),
        use_container_width=True,
    )
with col_brand:
    st.plotly_chart(
        pareto_chart(
            state.brand_pareto,
            price_col="meanPrice",
            score_col="meanSIS",
            label_col="Brand",
            title="Brands: mean price vs. mean SIS",
        ),
        use_container_width=True,
    )

if IS_PARETO in state.scored:
    st.metric("Pareto-optimal records", int(state.scored[IS_PARETO].sum()))

recommendations = state.recommendations
if recommendations.is_empty():
    st.info("No Pareto-optimal records with the current filters.")
    st.stop()

tab_max, tab_value, tab_balanced = st.tabs(["Max sustainability", "Best value", "Balanced"])
with tab_max:
    st.caption("Highest SIS first.")
    st.dataframe(build_recommendation_table(recommendations.max_sustainability), hide_index=True)
with tab_value:
    st.caption("Lowest price first.")
    st.dataframe(build_recommendation_table(recommendations.best_value), hide_index=True)
with tab_balanced:
    st.caption("Closest to the ideal of lowest price and highest SIS within the Pareto set.")
    st.dataframe(build_recommendation_table(recommendations.balanced), hide_index=True)

with st.expander("All records on the frontier"):
    frontier = state.scored.loc[state.scored[IS_PARETO]]
    visible = [column for column in (BRAND_NAME, MATERIAL, PRICE, SIS) if column in frontier]
    st.dataframe(frontier.loc[:, visible].sort_values(PRICE), hide_index=True, use_container_width=True)

col_csv, col_json = st.columns(2)
col_csv.download_button(
    "Download recommendations (CSV)",
    data=recommendations_to_csv(recommendations),
    file_name="sustaingraph_recommendations.csv",
    mime="text/csv",
)
col_json.download_button(
    "Download analysis (JSON)",
    data=state_to_json(state, include_records=False),
    file_name="sustaingraph_analysis.json",
    mime="application/json",
)
