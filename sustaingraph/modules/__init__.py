# sustaingraph/modules/__init__.py
"""
Lightweight exports for the analytics core.

Notes:
- Loaders and the pipeline entry point are imported eagerly.
- Streamlit/Altair/Plotly helpers are imported lazily so that the CLI and
  the tests of the pure core never pull in the dashboard stack.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

from .config import AnalysisConfig, load_config
from .errors import (
    AnalysisError,
    ConfigurationError,
    InputError,
    InvalidClusterCountError,
    InvalidRecordDatasetError,
    MissingDatasetError,
)
from .io import RecordFilters, apply_filters, filter_options, load_records
from .pipeline import AnalysisState, run_analysis

__all__ = [
    # IO
    "load_records",
    "filter_options",
    "apply_filters",
    "RecordFilters",
    # Config
    "AnalysisConfig",
    "load_config",
    # Pipeline
    "AnalysisState",
    "run_analysis",
    # Errors
    "AnalysisError",
    "ConfigurationError",
    "InputError",
    "InvalidClusterCountError",
    "InvalidRecordDatasetError",
    "MissingDatasetError",
    # Presentation (lazy)
    "ElbowScene",
    "ClusterScene",
    "pareto_chart",
    "weights_chart",
]


_LAZY_MODULES = {
    "visualizations": {
        "ElbowScene",
        "ClusterScene",
    },
    "charts": {
        "pareto_chart",
        "weights_chart",
    },
}


def __getattr__(name: str) -> Any:
    for module_name, symbols in _LAZY_MODULES.items():
        if name in symbols:
            module = import_module(f".{module_name}", __name__)
            value = getattr(module, name)
            globals()[name] = value
            return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
