# sustaingraph/modules/io.py
"""CSV loading, value coercion and row filters for brand records."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Dict, Sequence

import pandas as pd

from .dataset_validation import missing_required_columns, validate_records
from .errors import InputError, MissingDatasetError
from .paths import DEFAULT_DATASET
from .schema import (
    COUNTRY,
    CERTIFICATIONS,
    FILTER_COLUMNS,
    MARKET_TREND,
    MATERIAL,
    NUMERIC_COLUMNS,
    RATING_COLUMNS,
    TEXT_COLUMNS,
    YEAR,
    YES_NO_COLUMNS,
)
from .utils import parse_number, rating_to_score, safe_int, yes_no_score

LOGGER = logging.getLogger(__name__)

INSTALL_DATA_HINT = "Upload a CSV from the sidebar or point SUSTAINGRAPH_DATA_ROOT at a data folder."


def format_missing_dataset_message(error: MissingDatasetError) -> str:
    return f"{error} {INSTALL_DATA_HINT}"


def _count_unparsed(raw: pd.Series, parsed: pd.Series) -> int:
    text = raw.astype(str).str.strip()
    provided = raw.notna() & text.ne("") & ~text.str.lower().isin({"nan", "none", "null"})
    return int((provided & parsed.isna()).sum())


def prepare_records(frame: pd.DataFrame) -> pd.DataFrame:
    """Coerce raw cells into the types the analytics core expects.

    Returns a new frame. Missing text columns become ``""`` and missing
    numeric indicators become ``0.0``; unparseable or negative numbers
    become ``NaN`` with a warning.
    Ratings map letter grades to numbers and recycling/eco flags map
    yes/no answers to ``1``/``0``.
    """

    result = frame.copy()
    result.columns = [str(column).strip() for column in result.columns]

    for column in TEXT_COLUMNS:
        if column in result.columns:
            result[column] = result[column].fillna("").astype(str).str.strip()
        else:
            result[column] = ""

    for column in NUMERIC_COLUMNS:
        if column not in result.columns:
            result[column] = 0.0
            continue
        raw = result[column]
        parsed = raw.map(parse_number).astype(float)
        unparsed = _count_unparsed(raw, parsed)
        if unparsed:
            LOGGER.warning("%d value(s) in %s could not be parsed as numbers", unparsed, column)
        negative = parsed.lt(0)
        if negative.any():
            LOGGER.warning(
                "%d negative value(s) in %s treated as missing", int(negative.sum()), column
            )
            parsed = parsed.mask(negative)
        result[column] = parsed

    for column in RATING_COLUMNS:
        if column in result.columns:
            result[column] = result[column].map(rating_to_score).astype(float)
        else:
            result[column] = 0.0

    for column in YES_NO_COLUMNS:
        if column in result.columns:
            result[column] = result[column].map(yes_no_score).astype(float)
        else:
            result[column] = 0.0

    if YEAR in result.columns:
        result[YEAR] = result[YEAR].map(lambda value: safe_int(value, default=None)).astype("Int64")
    else:
        result[YEAR] = pd.Series([pd.NA] * len(result), index=result.index, dtype="Int64")

    return result


def read_records_csv(source: str | Path | IO[Any] | bytes) -> pd.DataFrame:
    """Read a CSV into a raw string frame.

    The delimiter is ``;`` when the header line contains one, ``,`` otherwise.
    """

    try:
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.is_file():
                raise MissingDatasetError(path)
            text = path.read_text(encoding="utf-8-sig")
        elif isinstance(source, bytes):
            text = source.decode("utf-8-sig")
        else:
            content = source.read()
            text = content.decode("utf-8-sig") if isinstance(content, bytes) else str(content)
    except UnicodeDecodeError as exc:
        raise InputError(f"The CSV file is not valid UTF-8: {exc}") from exc

    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return pd.DataFrame()
    delimiter = ";" if ";" in lines[0] else ","

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except pd.errors.ParserError as exc:
        raise InputError(f"Could not parse the CSV file: {exc}") from exc
    return frame


def load_records(source: str | Path | IO[Any] | bytes | None = None) -> pd.DataFrame:
    """Load, coerce and validate brand records.

    ``source`` defaults to the bundled sample dataset.
    """

    raw = read_records_csv(DEFAULT_DATASET if source is None else source)
    raw.columns = [str(column).strip() for column in raw.columns]
    missing = missing_required_columns(raw)
    if missing and not raw.empty:
        LOGGER.warning("Dataset is missing columns %s; they will be filled with defaults", missing)
    records = prepare_records(raw)
    validate_records(records)
    LOGGER.info("Loaded %d brand record(s)", len(records))
    return records


@dataclass(frozen=True)
class RecordFilters:
    """User selections from the dashboard sidebar; empty tuples mean "all"."""

    countries: tuple[str, ...] = ()
    materials: tuple[str, ...] = ()
    certifications: tuple[str, ...] = ()
    market_trends: tuple[str, ...] = ()
    year_range: tuple[int, int] | None = None

    def is_empty(self) -> bool:
        return not (
            self.countries
            or self.materials
            or self.certifications
            or self.market_trends
            or self.year_range
        )


def filter_options(records: pd.DataFrame) -> Dict[str, Any]:
    """Distinct values per filter column plus the available year range."""

    options: Dict[str, Any] = {}
    for column in FILTER_COLUMNS:
        if column not in records.columns:
            options[column] = []
            continue
        values = records[column].fillna("").astype(str).str.strip()
        options[column] = sorted(value for value in values.unique() if value)

    years = pd.to_numeric(records.get(YEAR, pd.Series(dtype=float)), errors="coerce").dropna()
    options[YEAR] = (int(years.min()), int(years.max())) if not years.empty else None
    return options


def _isin(frame: pd.DataFrame, column: str, selected: Sequence[str]) -> pd.Series:
    if not selected or column not in frame.columns:
        return pd.Series(True, index=frame.index)
    return frame[column].astype(str).isin(set(selected))


def apply_filters(records: pd.DataFrame, filters: RecordFilters | None) -> pd.DataFrame:
    """Return the rows matching every active filter as a new frame."""

    if filters is None or filters.is_empty() or records.empty:
        return records.copy()

    mask = (
        _isin(records, COUNTRY, filters.countries)
        & _isin(records, MATERIAL, filters.materials)
        & _isin(records, CERTIFICATIONS, filters.certifications)
        & _isin(records, MARKET_TREND, filters.market_trends)
    )
    if filters.year_range is not None and YEAR in records.columns:
        low, high = filters.year_range
        years = pd.to_numeric(records[YEAR], errors="coerce")
        mask &= years.between(low, high).fillna(False).astype(bool)

    filtered = records.loc[mask].copy()
    LOGGER.debug("Filters kept %d of %d record(s)", len(filtered), len(records))
    return filtered


__all__ = [
    "INSTALL_DATA_HINT",
    "RecordFilters",
    "apply_filters",
    "filter_options",
    "format_missing_dataset_message",
    "load_records",
    "prepare_records",
    "read_records_csv",
]
