"""Shared column constants for brand sustainability records."""

from __future__ import annotations

BRAND_ID = "Brand_ID"
BRAND_NAME = "Brand_Name"
COUNTRY = "Country"
MATERIAL = "Material_Type"
YEAR = "Year"
CERTIFICATIONS = "Certifications"
MARKET_TREND = "Market_Trend"

CARBON = "Carbon_Footprint_MT"
WATER = "Water_Usage_Liters"
WASTE = "Waste_Production_KG"
PRICE = "Average_Price_USD"
RATING = "Sustainability_Rating"
RECYCLING = "Recycling_Programs"
ECO_MANUFACTURING = "Eco_Friendly_Manufacturing"
PRODUCT_LINES = "Product_Lines"

SIS = "SIS"
ENV_SCORE = "envScore"
POLICY_SCORE = "policyScore"
ENV_SCORE_NORM = "envScoreNorm"
POLICY_SCORE_NORM = "policyScoreNorm"
IS_PARETO = "isPareto"

TEXT_COLUMNS: tuple[str, ...] = (
    BRAND_ID,
    BRAND_NAME,
    COUNTRY,
    MATERIAL,
    CERTIFICATIONS,
    MARKET_TREND,
)

NUMERIC_COLUMNS: tuple[str, ...] = (
    CARBON,
    WATER,
    WASTE,
    PRICE,
    PRODUCT_LINES,
)

RATING_COLUMNS: tuple[str, ...] = (RATING,)

YES_NO_COLUMNS: tuple[str, ...] = (RECYCLING, ECO_MANUFACTURING)

ENVIRONMENTAL_COLUMNS: tuple[str, ...] = (CARBON, WATER, WASTE)
"""Raw footprint indicators, lower is better."""

POLICY_COLUMNS: tuple[str, ...] = (RATING, RECYCLING)
"""Policy indicators, higher is better."""

FILTER_COLUMNS: tuple[str, ...] = (COUNTRY, MATERIAL, CERTIFICATIONS, MARKET_TREND)

UNKNOWN_LABEL = "Unknown"

COLUMN_LABELS: dict[str, str] = {
    CARBON: "Carbon (MT)",
    WATER: "Water (L)",
    WASTE: "Waste (kg)",
    PRICE: "Avg. price (USD)",
    RATING: "Rating",
    RECYCLING: "Recycling",
    SIS: "SIS",
}


def norm_column(column: str) -> str:
    """Name of the normalized companion column for ``column``."""

    return f"{column}_norm"
