from __future__ import annotations

import sys
from pathlib import Path

from sustaingraph.bootstrap import (
    ensure_project_root,
    ensure_streamlit_entrypoint,
    find_project_root,
)


def _assert_package_present(root: Path) -> None:
    package = root / "sustaingraph"
    assert package.is_dir()
    assert (package / "__init__.py").is_file()


def test_ensure_streamlit_entrypoint_for_home_includes_package(monkeypatch) -> None:
    monkeypatch.setattr(sys, "path", [])

    root = ensure_streamlit_entrypoint(Path("sustaingraph/Home.py"))

    assert sys.path[0] == str(root)
    _assert_package_present(root)


def test_ensure_streamlit_entrypoint_for_nested_page_includes_package(monkeypatch) -> None:
    monkeypatch.setattr(sys, "path", [])

    root = ensure_streamlit_entrypoint(Path("sustaingraph/pages/x.py"))

    assert sys.path[0] == str(root)
    _assert_package_present(root)


def test_ensure_streamlit_entrypoint_accepts_string_path(monkeypatch) -> None:
    monkeypatch.setattr(sys, "path", [])

    root = ensure_streamlit_entrypoint("sustaingraph/pages/another_page.py")

    assert sys.path[0] == str(root)
    _assert_package_present(root)


def test_ensure_project_root_does_not_duplicate_entries(monkeypatch) -> None:
    monkeypatch.setattr(sys, "path", [])

    first = ensure_project_root()
    second = ensure_project_root()

    assert first == second
    assert sys.path.count(str(first)) == 1


def test_find_project_root_falls_back_to_checkout(tmp_path) -> None:
    root = find_project_root(tmp_path / "elsewhere" / "page.py")

    _assert_package_present(root)
