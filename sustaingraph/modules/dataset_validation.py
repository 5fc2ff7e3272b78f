"""Dataset validation helpers used by the CSV loader."""

from __future__ import annotations

import math
from typing import Any

import pandas as pd
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import InvalidRecordDatasetError
from .schema import CARBON, MATERIAL, PRICE, WASTE, WATER


REQUIRED_RECORD_COLUMNS = {
    MATERIAL,
    CARBON,
    WATER,
    WASTE,
    PRICE,
}

_VALIDATED_COLUMNS = ["Brand_ID", "Brand_Name", MATERIAL, CARBON, WATER, WASTE, PRICE]


class _BrandRecordRow(BaseModel):
    """Pydantic model enforcing ranges for one brand sustainability record."""

    Brand_ID: str | None = None
    Brand_Name: str | None = None
    Material_Type: str | None = None
    Carbon_Footprint_MT: float | None = Field(default=None, ge=0)
    Water_Usage_Liters: float | None = Field(default=None, ge=0)
    Waste_Production_KG: float | None = Field(default=None, ge=0)
    Average_Price_USD: float | None = Field(default=None, ge=0)

    @field_validator(
        "Carbon_Footprint_MT",
        "Water_Usage_Liters",
        "Waste_Production_KG",
        "Average_Price_USD",
        mode="before",
    )
    @classmethod
    def _missing_as_none(cls, value: Any) -> Any:
        if isinstance(value, float) and math.isnan(value):
            return None
        return value

    model_config = {
        "extra": "ignore",
    }


def _format_validation_errors(error: ValidationError, row_index: int) -> tuple[str, ...]:
    messages: list[str] = []
    for issue in error.errors():
        location = issue.get("loc", ("?",))
        column = location[0] if location else "?"
        msg = issue.get("msg", "invalid value")
        messages.append(f"row {row_index}: {column}: {msg}")
    return tuple(messages)


def missing_required_columns(frame: pd.DataFrame) -> list[str]:
    """Required columns that are absent from ``frame``, sorted."""

    return sorted(REQUIRED_RECORD_COLUMNS.difference(frame.columns))


def validate_records(
    frame: pd.DataFrame,
    *,
    dataset_label: str = "the brand dataset",
) -> pd.DataFrame:
    """Validate *frame* with :mod:`pydantic` before it reaches the pipeline.

    Missing columns are not an error here; the loader fills them. Negative
    footprints or prices are rejected with every offending row listed in
    :attr:`InvalidRecordDatasetError.issues`. :func:`~sustaingraph.modules.io.load_records`
    masks negatives before calling this, so only frames built elsewhere fail.
    """

    subset = frame.reindex(columns=_VALIDATED_COLUMNS)
    subset = subset.astype(object)
    subset = subset.where(pd.notna(subset), None)
    records = subset.to_dict(orient="records")

    issues: list[str] = []
    for row_index, record in enumerate(records):
        try:
            _BrandRecordRow.model_validate(record)
        except ValidationError as error:
            issues.extend(_format_validation_errors(error, row_index))

    if issues:
        joined = "; ".join(issues[:5])
        if len(issues) > 5:
            joined += f"; ... ({len(issues) - 5} more)"
        message = (
            f"{dataset_label.capitalize()} contains invalid values: {joined}. "
            "Fix the data before loading the file again."
        )
        raise InvalidRecordDatasetError(message, issues=issues)

    return frame


__all__ = [
    "REQUIRED_RECORD_COLUMNS",
    "missing_required_columns",
    "validate_records",
]
