"""Make ``sustaingraph`` importable from Streamlit scripts and CLI helpers.

``streamlit run sustaingraph/Home.py`` executes the page as a plain script,
so the repository root has to be on ``sys.path`` before any
``sustaingraph.*`` import.
"""

from __future__ import annotations

import sys
from pathlib import Path

PACKAGE_NAME = "sustaingraph"


def _is_project_root(candidate: Path) -> bool:
    return (candidate / PACKAGE_NAME / "__init__.py").is_file()


def find_project_root(start: str | Path | None = None) -> Path:
    """Nearest directory at or above ``start`` that contains the package.

    Falls back to the directory two levels above this module, which is the
    repository root of a source checkout.
    """

    origin = Path(start if start is not None else __file__).resolve()
    for candidate in (origin, *origin.parents):
        if _is_project_root(candidate):
            return candidate
    return Path(__file__).resolve().parents[1]


def ensure_project_root(start: str | Path | None = None) -> Path:
    """Put the project root first on ``sys.path`` unless it is already there."""

    root = find_project_root(start)
    entry = str(root)
    if entry not in sys.path:
        sys.path.insert(0, entry)
    return root


def ensure_streamlit_entrypoint(module_file: str | Path) -> Path:
    """Called at the top of every Streamlit page with ``__file__``."""

    return ensure_project_root(module_file)


__all__ = [
    "ensure_project_root",
    "ensure_streamlit_entrypoint",
    "find_project_root",
]
