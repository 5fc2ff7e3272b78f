# sustaingraph/modules/exporters.py
"""Serialize analysis results for downloads and the CLI."""

from __future__ import annotations

import io
import json
from typing import Any, Dict, List

import pandas as pd

from .pipeline import AnalysisState
from .ranking import Recommendations

CATEGORY_COLUMN = "category"


def _frame_records(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """Records with NaN as ``null`` and numpy scalars as plain JSON values."""

    if frame is None or frame.empty:
        return []
    return json.loads(frame.to_json(orient="records", date_format="iso"))


def state_to_dict(state: AnalysisState, *, include_records: bool = True) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "summary": state.summary(),
        "stats": state.stats.to_dict(),
        "entropyWeights": state.weights.to_dict(),
        "elbow": state.elbow.to_dict(),
        "kmeans": state.kmeans.to_dict(),
        "materialAgg": _frame_records(state.material_agg),
        "brandAgg": _frame_records(state.brand_agg),
        "materialPareto": _frame_records(state.material_pareto),
        "brandPareto": _frame_records(state.brand_pareto),
        "recommendations": {
            name: _frame_records(frame)
            for name, frame in state.recommendations.categories().items()
        },
        "breakdowns": {
            dimension: _frame_records(frame) for dimension, frame in state.breakdowns.items()
        },
        "config": state.config.model_dump(mode="json"),
    }
    if include_records:
        payload["records"] = _frame_records(state.scored)
    return payload


def state_to_json(state: AnalysisState, *, include_records: bool = True) -> bytes:
    payload = state_to_dict(state, include_records=include_records)
    return json.dumps(payload, indent=2).encode("utf-8")


def recommendations_to_frame(recommendations: Recommendations) -> pd.DataFrame:
    """Stack the three lists into one frame with a ``category`` column."""

    frames = [
        frame.assign(**{CATEGORY_COLUMN: name})
        for name, frame in recommendations.categories().items()
        if not frame.empty
    ]
    if not frames:
        return pd.DataFrame(columns=[CATEGORY_COLUMN])
    stacked = pd.concat(frames, ignore_index=True, sort=False)
    ordered = [CATEGORY_COLUMN] + [column for column in stacked.columns if column != CATEGORY_COLUMN]
    return stacked[ordered]


def recommendations_to_csv(recommendations: Recommendations) -> bytes:
    buf = io.StringIO()
    recommendations_to_frame(recommendations).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


def scored_to_csv(scored: pd.DataFrame) -> bytes:
    buf = io.StringIO()
    scored.to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")


__all__ = [
    "CATEGORY_COLUMN",
    "recommendations_to_csv",
    "recommendations_to_frame",
    "scored_to_csv",
    "state_to_dict",
    "state_to_json",
]
