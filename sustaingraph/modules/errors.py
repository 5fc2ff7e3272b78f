"""Exception types raised by the analytics core and its loaders."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class AnalysisError(Exception):
    """Base class for every error surfaced by the analysis pipeline."""


class InputError(AnalysisError, ValueError):
    """Raised when the record batch or a direct argument cannot be used."""

    def __init__(self, message: str, *, issues: Iterable[str] | None = None) -> None:
        self.issues = tuple(issues or [])
        super().__init__(message)


class InvalidRecordDatasetError(InputError):
    """Raised when the brand dataset does not match the expected schema."""


class InvalidClusterCountError(InputError):
    """Raised when k-means is asked for a non-positive number of clusters."""

    def __init__(self, k: int) -> None:
        self.k = k
        super().__init__(f"Number of clusters must be a positive integer, got {k!r}")


class ConfigurationError(AnalysisError, ValueError):
    """Raised when analysis settings are out of range or malformed."""

    def __init__(self, message: str, *, issues: Iterable[str] | None = None) -> None:
        self.issues = tuple(issues or [])
        super().__init__(message)


class MissingDatasetError(FileNotFoundError):
    """Raised when a required dataset file is missing from disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Required dataset not found: {self.path}")


__all__ = [
    "AnalysisError",
    "ConfigurationError",
    "InputError",
    "InvalidClusterCountError",
    "InvalidRecordDatasetError",
    "MissingDatasetError",
]
