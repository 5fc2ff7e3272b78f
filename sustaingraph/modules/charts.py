"""Plotly figures for the Pareto page."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from .schema import IS_PARETO


def pareto_chart(
    df: pd.DataFrame,
    *,
    price_col: str,
    score_col: str,
    label_col: str,
    title: str = "Price vs. SIS",
) -> go.Figure:
    """Scatter of every row with the Pareto frontier drawn as a step line.

    ``df`` must carry the ``isPareto`` flag produced by
    :func:`~sustaingraph.modules.analytics.with_pareto_flags`.
    """

    if df.empty:
        return go.Figure()

    flags = df[IS_PARETO].astype(bool) if IS_PARETO in df.columns else pd.Series(False, index=df.index)
    dominated = df.loc[~flags]
    frontier = df.loc[flags].sort_values(price_col)

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=dominated[price_col], y=dominated[score_col], mode="markers",
        marker=dict(size=9, color="#94a3b8", opacity=0.7),
        text=dominated[label_col].astype(str),
        hovertemplate="%{text}<br>Price %{x:,.2f}<br>SIS %{y:.3f}<extra></extra>",
        name="Dominated",
    ))
    fig.add_trace(go.Scatter(
        x=frontier[price_col], y=frontier[score_col], mode="lines+markers",
        line=dict(color="#0f766e", width=2, shape="hv"),
        marker=dict(size=11, color="#f97316", line=dict(color="#0f766e", width=1)),
        text=frontier[label_col].astype(str),
        hovertemplate="%{text}<br>Price %{x:,.2f}<br>SIS %{y:.3f}<extra></extra>",
        name="Pareto frontier",
    ))
    fig.update_layout(
        title=title, height=440,
        xaxis_title="Average price (USD)", yaxis_title="SIS",
        margin=dict(l=20, r=20, t=60, b=20),
        legend=dict(orientation="h", y=-0.2),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def weights_chart(w_env: float, w_policy: float) -> go.Figure:
    """Donut with the two entropy group weights."""

    fig = go.Figure(go.Pie(
        labels=["Environmental", "Policy"],
        values=[w_env, w_policy],
        hole=0.55,
        marker=dict(colors=["#0f766e", "#6366f1"]),
        texttemplate="%{label}<br>%{percent}",
        sort=False,
    ))
    fig.update_layout(
        height=280, showlegend=False,
        margin=dict(l=10, r=10, t=10, b=10),
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


__all__ = ["pareto_chart", "weights_chart"]
