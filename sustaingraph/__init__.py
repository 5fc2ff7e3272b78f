"""SustainGraph: sustainability analytics for fashion-brand records."""

from __future__ import annotations

from .bootstrap import ensure_project_root, ensure_streamlit_entrypoint

__version__ = "0.1.0"

__all__ = ["__version__", "ensure_project_root", "ensure_streamlit_entrypoint"]
