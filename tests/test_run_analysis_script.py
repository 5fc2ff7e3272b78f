from __future__ import annotations

import json
import sys
from pathlib import Path

import pandas as pd

import scripts.run_analysis as script


def test_run_analysis_script_bootstrap(monkeypatch):
    """The CLI helper should always ensure the repo root is importable."""

    repo_root = Path(__file__).resolve().parents[1]
    repo_str = str(repo_root)

    new_path = [entry for entry in sys.path if entry != repo_str]
    monkeypatch.setattr(sys, "path", new_path, raising=False)
    assert repo_str not in sys.path

    script._ensure_project_root()

    assert repo_str in sys.path


def test_main_writes_analysis_json(tmp_path, capsys):
    output = tmp_path / "out" / "analysis.json"
    recommendations = tmp_path / "recommendations.csv"

    exit_code = script.main(
        [
            "--output",
            str(output),
            "--recommendations-csv",
            str(recommendations),
            "--max-k",
            "3",
            "--top",
            "2",
            "--summary",
        ]
    )

    assert exit_code == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["config"]["kmeans"]["max_k"] == 3
    assert len(payload["elbow"]["curve"]) <= 3
    assert all(len(rows) <= 2 for rows in payload["recommendations"].values())
    assert payload["summary"]["records"] == len(payload["records"])

    frame = pd.read_csv(recommendations)
    assert "category" in frame.columns

    stdout = capsys.readouterr().out
    assert "[maxSustainability]" in stdout
    assert f"Analysis saved to {output}" in stdout


def test_main_without_records(tmp_path):
    output = tmp_path / "analysis.json"

    assert script.main(["--output", str(output), "--no-records", "--log-level", "WARNING"]) == 0

    assert "records" not in json.loads(output.read_text(encoding="utf-8"))


def test_main_reports_missing_dataset(tmp_path):
    output = tmp_path / "analysis.json"

    exit_code = script.main([str(tmp_path / "absent.csv"), "--output", str(output)])

    assert exit_code == 2
    assert not output.exists()


def test_main_reports_invalid_config(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("kmeans:\n  max_k: 0\n", encoding="utf-8")
    output = tmp_path / "analysis.json"

    exit_code = script.main(["--config", str(config), "--output", str(output)])

    assert exit_code == 1
    assert not output.exists()
