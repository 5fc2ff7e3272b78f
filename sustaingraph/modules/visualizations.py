"""Altair scenes for the dashboard pages: elbow curve, material clusters and breakdowns."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import altair as alt
import pandas as pd
import streamlit as st

from .clustering import ElbowResult
from .schema import COUNTRY, MARKET_TREND, MATERIAL, YEAR

_AXIS = alt.Axis(labelColor="#64748b", titleColor="#475569")

DIMENSION_LABELS = {
    MATERIAL: "Material",
    COUNTRY: "Country",
    MARKET_TREND: "Market trend",
    YEAR: "Year",
}


def _format_value(value: float | int | None, fmt: str, *, suffix: str = "") -> str:
    if value is None or pd.isna(value):
        return "-"
    return f"{format(float(value), fmt)}{suffix}"


def elbow_frame(elbow: ElbowResult) -> pd.DataFrame:
    frame = pd.DataFrame(elbow.curve, columns=["k", "inertia"])
    frame["selected"] = frame["k"] == elbow.best_k
    return frame


def describe_cluster(mean_env: float, mean_policy: float) -> str:
    """Short label for a cluster centre in the (environment, policy) plane."""

    env = "strong environmental profile" if mean_env >= 0.5 else "weak environmental profile"
    policy = "strong policy" if mean_policy >= 0.5 else "weak policy"
    return f"{env}, {policy}"


def cluster_interpretation(material_agg: pd.DataFrame) -> pd.DataFrame:
    """One row per cluster: member materials, mean features and a label."""

    columns = ["cluster", "materials", "count", "meanEnvNorm", "meanPolicyNorm", "meanSIS", "profile"]
    if material_agg.empty or "cluster" not in material_agg.columns:
        return pd.DataFrame(columns=columns)

    grouped = material_agg.groupby("cluster", sort=True)
    table = grouped.agg(
        materials=(MATERIAL, lambda values: ", ".join(sorted(map(str, values)))),
        count=(MATERIAL, "size"),
        meanEnvNorm=("meanEnvNorm", "mean"),
        meanPolicyNorm=("meanPolicyNorm", "mean"),
        meanSIS=("meanSIS", "mean"),
    ).reset_index()
    table["profile"] = [
        describe_cluster(env, policy)
        for env, policy in zip(table["meanEnvNorm"], table["meanPolicyNorm"])
    ]
    return table[columns]


@dataclass
class ElbowScene:
    """Inertia per k with the selected elbow highlighted."""

    elbow: ElbowResult
    title: str = "Elbow method"
    subtitle: str = "Within-cluster inertia for each candidate number of clusters."
    height: int = 300
    _prepared: pd.DataFrame = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._prepared = elbow_frame(self.elbow)

    def build_chart(self) -> alt.Chart:
        if self._prepared.empty:
            return alt.Chart(pd.DataFrame({"k": [], "inertia": []}))

        base = alt.Chart(self._prepared).encode(
            x=alt.X("k:O", title="Number of clusters (k)", axis=_AXIS),
            y=alt.Y("inertia:Q", title="Inertia (lower is tighter)", axis=_AXIS),
            tooltip=[
                alt.Tooltip("k:O", title="k"),
                alt.Tooltip("inertia:Q", title="Inertia", format=".4f"),
            ],
        )
        line = base.mark_line(color="#0f766e", strokeWidth=2.4)
        points = base.mark_circle(size=90).encode(
            color=alt.condition(
                alt.datum.selected,
                alt.value("#f97316"),
                alt.value("#0f766e"),
            )
        )
        return alt.layer(line, points).properties(height=self.height).configure_view(strokeOpacity=0)

    def render(self, container: st.delta_generator | None = None) -> None:
        target = container or st
        if self._prepared.empty:
            target.info("No clustering results yet. Run the analysis first.")
            return

        target.subheader(self.title)
        if self.subtitle:
            target.caption(self.subtitle)
        col_k, col_inertia = target.columns(2)
        selected = self._prepared.loc[self._prepared["selected"], "inertia"]
        col_k.metric("Selected k", str(self.elbow.best_k))
        col_inertia.metric(
            "Inertia at selected k",
            _format_value(selected.iloc[0] if not selected.empty else None, ".4f"),
        )
        target.altair_chart(self.build_chart(), use_container_width=True)


@dataclass
class ClusterScene:
    """Materials in the (environment, policy) plane coloured by cluster."""

    material_agg: pd.DataFrame
    title: str = "Material clusters"
    microcopy: Sequence[str] | None = None
    height: int = 380

    def build_chart(self) -> alt.Chart:
        data = self.material_agg
        if data.empty or "cluster" not in data.columns:
            return alt.Chart(pd.DataFrame({"meanEnvNorm": [], "meanPolicyNorm": []}))

        return (
            alt.Chart(data)
            .mark_circle(opacity=0.85, stroke="#1e293b", strokeWidth=0.6)
            .encode(
                x=alt.X(
                    "meanEnvNorm:Q",
                    title="Environmental score (normalized)",
                    scale=alt.Scale(domain=[0, 1]),
                    axis=_AXIS,
                ),
                y=alt.Y(
                    "meanPolicyNorm:Q",
                    title="Policy score (normalized)",
                    scale=alt.Scale(domain=[0, 1]),
                    axis=_AXIS,
                ),
                color=alt.Color("cluster:N", title="Cluster"),
                size=alt.Size("count:Q", title="Records", scale=alt.Scale(range=[80, 600])),
                tooltip=[
                    alt.Tooltip(f"{MATERIAL}:N", title="Material"),
                    alt.Tooltip("cluster:N", title="Cluster"),
                    alt.Tooltip("count:Q", title="Records"),
                    alt.Tooltip("meanSIS:Q", title="Mean SIS", format=".3f"),
                    alt.Tooltip("meanPrice:Q", title="Mean price", format=",.2f"),
                ],
            )
            .properties(height=self.height)
            .interactive()
        )

    def render(self, container: st.delta_generator | None = None) -> None:
        target = container or st
        if self.material_agg.empty or "cluster" not in self.material_agg.columns:
            target.info("No materials to cluster with the current filters.")
            return

        target.subheader(self.title)
        for line in list(self.microcopy or [])[:2]:
            target.markdown(f"- {line}")
        target.altair_chart(self.build_chart(), use_container_width=True)


def describe_breakdown(breakdown: pd.DataFrame, dimension: str) -> list[str]:
    """Headline sentences for one breakdown table.

    Every dimension names the entry with the highest mean SIS. Market trends
    add the most common trend, the other dimensions the most expensive entry.
    """

    if breakdown.empty or dimension not in breakdown.columns:
        return []

    label = DIMENSION_LABELS.get(dimension, dimension).lower()
    top_sis = breakdown.loc[breakdown["meanSIS"].idxmax()]
    lines = [
        f"**{top_sis[dimension]}** has the highest mean SIS among {label} groups "
        f"({_format_value(top_sis['meanSIS'], '.3f')})."
    ]
    if dimension == MARKET_TREND:
        top_count = breakdown.loc[breakdown["count"].idxmax()]
        lines.append(
            f"**{top_count[dimension]}** is the most common trend "
            f"({int(top_count['count'])} record(s))."
        )
    else:
        top_price = breakdown.loc[breakdown["meanPrice"].idxmax()]
        lines.append(
            f"**{top_price[dimension]}** has the highest mean price "
            f"(${_format_value(top_price['meanPrice'], ',.2f')})."
        )
    return lines


@dataclass
class BreakdownScene:
    """Bars of mean price (record count for trends) with mean SIS overlaid."""

    breakdown: pd.DataFrame
    dimension: str
    title: str | None = None
    top_n: int | None = 10
    height: int = 340

    def chart_frame(self) -> pd.DataFrame:
        """Rows the chart draws, top ``top_n`` only for materials and countries."""

        data = self.breakdown
        if data.empty or self.dimension not in data.columns:
            return pd.DataFrame(columns=[self.dimension, "count", "meanPrice", "meanSIS"])
        if self.top_n is not None and self.dimension in (MATERIAL, COUNTRY):
            data = data.head(self.top_n)
        data = data.copy()
        data[self.dimension] = data[self.dimension].astype(str)
        return data

    def build_chart(self) -> alt.LayerChart | alt.Chart:
        data = self.chart_frame()
        if data.empty:
            return alt.Chart(pd.DataFrame({self.dimension: [], "meanSIS": []}))

        label = DIMENSION_LABELS.get(self.dimension, self.dimension)
        order = data[self.dimension].tolist()
        if self.dimension == MARKET_TREND:
            bar_field, bar_title, bar_format = "count:Q", "Records", "d"
        else:
            bar_field, bar_title, bar_format = "meanPrice:Q", "Mean price (USD)", ",.2f"

        base = alt.Chart(data).encode(
            y=alt.Y(f"{self.dimension}:N", title=label, sort=order, axis=_AXIS),
            tooltip=[
                alt.Tooltip(f"{self.dimension}:N", title=label),
                alt.Tooltip("count:Q", title="Records"),
                alt.Tooltip("meanSIS:Q", title="Mean SIS", format=".3f"),
                alt.Tooltip("meanPrice:Q", title="Mean price", format=",.2f"),
                alt.Tooltip("meanCarbon:Q", title="Mean carbon (MT)", format=",.2f"),
            ],
        )
        bars = base.mark_bar(color="#94a3b8", opacity=0.8).encode(
            x=alt.X(bar_field, title=bar_title, axis=alt.Axis(format=bar_format, labelColor="#64748b")),
        )
        sis_x = alt.X(
            "meanSIS:Q",
            title="Mean SIS",
            scale=alt.Scale(domain=[0, 1]),
            axis=alt.Axis(orient="top", labelColor="#0f766e", titleColor="#0f766e"),
        )
        line = base.mark_line(color="#0f766e", strokeWidth=2.2).encode(x=sis_x)
        points = base.mark_circle(color="#0f766e", size=70).encode(x=sis_x)
        return (
            alt.layer(bars, alt.layer(line, points))
            .resolve_scale(x="independent")
            .properties(height=self.height)
            .configure_view(strokeOpacity=0)
        )

    def render(self, container: st.delta_generator | None = None) -> None:
        target = container or st
        label = DIMENSION_LABELS.get(self.dimension, self.dimension)
        if self.chart_frame().empty:
            target.info(f"No {label.lower()} data in the current dataset.")
            return

        target.subheader(self.title or f"Breakdown by {label.lower()}")
        for line in describe_breakdown(self.breakdown, self.dimension):
            target.markdown(f"- {line}")
        target.altair_chart(self.build_chart(), use_container_width=True)
        target.expander(f"{label} table").dataframe(
            self.breakdown, hide_index=True, use_container_width=True
        )


__all__ = [
    "BreakdownScene",
    "ClusterScene",
    "DIMENSION_LABELS",
    "ElbowScene",
    "cluster_interpretation",
    "describe_breakdown",
    "describe_cluster",
    "elbow_frame",
]
