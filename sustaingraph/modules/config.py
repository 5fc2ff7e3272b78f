"""Analysis settings: indicator columns, clustering and recommender knobs.

Settings are resolved in three layers: the defaults declared on the models,
the YAML file at :data:`~sustaingraph.modules.paths.CONFIG_PATH` (when it
exists) and finally ``SUSTAINGRAPH_*`` environment variables. The camelCase
keys used by the dashboard payloads (``indicatorColumns``, ``maxK``,
``maxIterations``, ``topN``) are accepted alongside snake_case names.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .execution import BACKEND_ALIASES
from .paths import CONFIG_PATH
from .schema import ENVIRONMENTAL_COLUMNS, POLICY_COLUMNS

LOGGER = logging.getLogger(__name__)

_ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "SUSTAINGRAPH_MAX_K": ("kmeans", "max_k"),
    "SUSTAINGRAPH_MAX_ITERATIONS": ("kmeans", "max_iterations"),
    "SUSTAINGRAPH_KMEANS_SEED": ("kmeans", "seed"),
    "SUSTAINGRAPH_TOP_N": ("recommender", "top_n"),
    "SUSTAINGRAPH_EXECUTION_BACKEND": ("execution", "backend"),
}


class IndicatorColumns(BaseModel):
    """Raw columns feeding the two indicator groups.

    Environmental indicators are footprints (lower is better) and enter the
    entropy step inverted; policy indicators are used as-is.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    environmental: Tuple[str, ...] = Field(default=ENVIRONMENTAL_COLUMNS, min_length=1)
    policy: Tuple[str, ...] = Field(default=POLICY_COLUMNS, min_length=1)


class KMeansSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    max_k: int = Field(default=6, ge=1, validation_alias=AliasChoices("max_k", "maxK"))
    max_iterations: int = Field(
        default=40,
        ge=1,
        validation_alias=AliasChoices("max_iterations", "maxIterations"),
    )
    seed: int = 0


class RecommenderSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    top_n: int = Field(default=5, ge=1, validation_alias=AliasChoices("top_n", "topN"))


class ExecutionSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    backend: str = "auto"

    @field_validator("backend")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        token = value.strip().lower()
        if token not in BACKEND_ALIASES:
            raise ValueError(f"unknown backend {value!r}; expected one of: {', '.join(sorted(BACKEND_ALIASES))}")
        return BACKEND_ALIASES[token]


class AnalysisConfig(BaseModel):
    """Complete configuration for one pipeline run."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    indicator_columns: IndicatorColumns = Field(
        default_factory=IndicatorColumns,
        validation_alias=AliasChoices("indicator_columns", "indicatorColumns"),
    )
    kmeans: KMeansSettings = Field(default_factory=KMeansSettings)
    recommender: RecommenderSettings = Field(default_factory=RecommenderSettings)
    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> "AnalysisConfig":
        """Validate ``payload`` and wrap pydantic errors in :class:`ConfigurationError`."""

        try:
            return cls.model_validate(dict(payload or {}))
        except ValidationError as error:
            issues = _format_validation_errors(error)
            raise ConfigurationError(
                "Invalid analysis configuration: " + "; ".join(issues),
                issues=issues,
            ) from error

    def with_overrides(self, **sections: Mapping[str, Any]) -> "AnalysisConfig":
        """Return a copy with the given sections updated, re-validating the result."""

        payload = self.model_dump()
        for section, values in sections.items():
            if not values:
                continue
            current = dict(payload.get(section) or {})
            current.update(values)
            payload[section] = current
        return AnalysisConfig.from_mapping(payload)


def _format_validation_errors(error: ValidationError) -> tuple[str, ...]:
    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ("?",))) or "?"
        msg = issue.get("msg", "invalid value")
        messages.append(f"{location}: {msg}")
    return tuple(messages)


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse {path.name}: {exc}") from exc
    if not isinstance(loaded, Mapping):
        raise ConfigurationError(f"{path.name} must contain a mapping at the top level")
    return dict(loaded)


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Dict[str, str]]:
    overrides: Dict[str, Dict[str, str]] = {}
    for var_name, (section, key) in _ENV_OVERRIDES.items():
        raw_value = environ.get(var_name)
        if raw_value is None or not raw_value.strip():
            continue
        overrides.setdefault(section, {})[key] = raw_value.strip()
    return overrides


def load_config(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AnalysisConfig:
    """Resolve the analysis configuration from defaults, YAML and environment."""

    config_path = Path(path) if path is not None else CONFIG_PATH
    payload: Dict[str, Any] = {}
    if config_path.is_file():
        payload = _read_yaml(config_path)
        LOGGER.debug("Loaded analysis configuration from %s", config_path)
    elif path is not None:
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    config = AnalysisConfig.from_mapping(payload)
    overrides = _env_overrides(os.environ if environ is None else environ)
    if overrides:
        LOGGER.info("Applying environment overrides: %s", sorted(overrides))
        config = config.with_overrides(**overrides)
    return config


__all__ = [
    "AnalysisConfig",
    "ExecutionSettings",
    "IndicatorColumns",
    "KMeansSettings",
    "RecommenderSettings",
    "load_config",
]
