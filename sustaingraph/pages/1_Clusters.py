import sys
from pathlib import Path

if not __package__:
    repo_root = Path(__file__).resolve().parents[2]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)

from sustaingraph.bootstrap import ensure_streamlit_entrypoint

ensure_streamlit_entrypoint(__file__)

__doc__ = """Material clusters: elbow curve, cluster scatter and interpretation."""

import streamlit as st

from sustaingraph.modules.page_data import ANALYSIS_STATE_KEY
from sustaingraph.modules.visualizations import (
    ClusterScene,
    ElbowScene,
    cluster_interpretation,
)

st.set_page_config(page_title="Clusters", page_icon="🧩", layout="wide")

state = st.session_state.get(ANALYSIS_STATE_KEY)
if state is None:
    st.warning("Run the analysis on the **Home** page first.")
    st.stop()

st.title("🧩 Material clusters")
st.caption(
    "Materials are grouped with k-means on their mean normalized environmental "
    "and policy scores; k is chosen with the elbow method."
)

ElbowScene(state.elbow).render()

if not state.kmeans.converged:
    st.caption(f"k-means stopped after {state.kmeans.iterations} iteration(s) without converging.")

ClusterScene(
    state.material_agg,
    microcopy=[
        f"**{len(state.material_agg)}** material(s) in **{state.best_k}** cluster(s).",
        "Bubble size is the number of records per material.",
    ],
).render()

st.subheader("Cluster interpretation")
st.dataframe(cluster_interpretation(state.material_agg), hide_index=True, use_container_width=True)

with st.expander("Material aggregates"):
    st.dataframe(state.material_agg, hide_index=True, use_container_width=True)
