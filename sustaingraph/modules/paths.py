"""Where SustainGraph looks for its dataset, configuration and exports.

``SUSTAINGRAPH_DATA_ROOT`` moves the whole data directory;
``SUSTAINGRAPH_CONFIG`` points at a different YAML file while keeping the
data root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DATA_ROOT_ENV_VAR = "SUSTAINGRAPH_DATA_ROOT"
CONFIG_ENV_VAR = "SUSTAINGRAPH_CONFIG"

DATASET_FILENAME = "fashion_brands_sample.csv"
CONFIG_FILENAME = "analysis.yaml"

_REPO_ROOT = Path(__file__).resolve().parents[2]


def _absolute(value: str | Path) -> Path:
    candidate = Path(value).expanduser()
    try:
        return candidate.resolve()
    except RuntimeError:
        # symlink loops
        return candidate.absolute()


def _env_path(environ: Mapping[str, str], name: str) -> Path | None:
    raw = (environ.get(name) or "").strip()
    return _absolute(raw) if raw else None


@dataclass(frozen=True)
class DataLocations:
    """Resolved filesystem locations for one process."""

    data_root: Path
    config_path: Path

    @property
    def dataset(self) -> Path:
        return self.data_root / DATASET_FILENAME

    @property
    def exports_dir(self) -> Path:
        return self.data_root / "exports"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DataLocations":
        env = os.environ if environ is None else environ
        data_root = _env_path(env, DATA_ROOT_ENV_VAR) or _absolute(_REPO_ROOT / "data")
        config_path = _env_path(env, CONFIG_ENV_VAR) or data_root / CONFIG_FILENAME
        return cls(data_root=data_root, config_path=config_path)


_LOCATIONS = DataLocations.from_env()

DATA_ROOT = _LOCATIONS.data_root
"""Directory containing the bundled dataset and analysis configuration."""

DEFAULT_DATASET = _LOCATIONS.dataset
"""Sample brand sustainability records used when nothing is uploaded."""

CONFIG_PATH = _LOCATIONS.config_path
"""YAML file with indicator columns and clustering/recommender settings."""

EXPORTS_DIR = _LOCATIONS.exports_dir
"""Default destination for analysis payloads written by the CLI."""


__all__ = [
    "CONFIG_PATH",
    "DATA_ROOT",
    "DEFAULT_DATASET",
    "DataLocations",
    "EXPORTS_DIR",
]
