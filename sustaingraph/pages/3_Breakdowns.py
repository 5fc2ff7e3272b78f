import sys
from pathlib import Path

if not __package__:
    repo_root = Path(__file__).resolve().parents[2]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)

from sustaingraph.bootstrap import ensure_streamlit_entrypoint

ensure_streamlit_entrypoint(__file__)

__doc__ = """Exploratory breakdowns of SIS, price and footprints by material, country, trend and year."""

import streamlit as st

from sustaingraph.modules.page_data import ANALYSIS_STATE_KEY
from sustaingraph.modules.scoring import BREAKDOWN_DIMENSIONS
from sustaingraph.modules.visualizations import DIMENSION_LABELS, BreakdownScene

st.set_page_config(page_title="Breakdowns", page_icon="📊", layout="wide")

state = st.session_state.get(ANALYSIS_STATE_KEY)
if state is None:
    st.warning("Run the analysis on the **Home** page first.")
    st.stop()

st.title("📊 Breakdowns")
st.caption(
    "Mean SIS, price and environmental footprints grouped by material, country, "
    "market trend and year. Materials and countries show the ten highest mean SIS."
)

tabs = st.tabs([DIMENSION_LABELS[dimension] for dimension in BREAKDOWN_DIMENSIONS])
for tab, dimension in zip(tabs, BREAKDOWN_DIMENSIONS):
    with tab:
        BreakdownScene(state.breakdowns[dimension], dimension).render()
