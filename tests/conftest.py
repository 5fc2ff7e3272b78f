"""Test configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest

PROJECT_ROOT_CANDIDATE = Path(__file__).resolve().parents[1]

try:
    from sustaingraph.bootstrap import ensure_project_root
except ModuleNotFoundError:  # pragma: no cover - fallback when PYTHONPATH lacks repo
    if str(PROJECT_ROOT_CANDIDATE) not in sys.path:
        sys.path.insert(0, str(PROJECT_ROOT_CANDIDATE))
    from sustaingraph.bootstrap import ensure_project_root

PROJECT_ROOT = ensure_project_root(PROJECT_ROOT_CANDIDATE)


@pytest.fixture
def cotton_records() -> pd.DataFrame:
    """Three prepared Cotton records with hand-checked scores."""

    return pd.DataFrame(
        {
            "Brand_ID": ["B1", "B2", "B3"],
            "Brand_Name": ["Alpha", "Beta", "Gamma"],
            "Material_Type": ["Cotton", "Cotton", "Cotton"],
            "Carbon_Footprint_MT": [10.0, 20.0, 30.0],
            "Water_Usage_Liters": [100.0, 200.0, 300.0],
            "Waste_Production_KG": [1.0, 2.0, 3.0],
            "Sustainability_Rating": [5.0, 3.0, 1.0],
            "Recycling_Programs": [1.0, 0.0, 1.0],
            "Average_Price_USD": [10.0, 20.0, 15.0],
        }
    )


@pytest.fixture
def brand_records() -> pd.DataFrame:
    """Raw string records spanning several materials, brands and countries."""

    rows = range(12)
    materials = ["Cotton", "Polyester", "Hemp", "Vegan Leather"]
    countries = ["France", "Japan", "USA"]
    ratings = ["A", "B", "C", "D"]
    return pd.DataFrame(
        {
            "Brand_ID": [f"BR{i:03d}" for i in rows],
            "Brand_Name": [f"Brand_{i % 6}" for i in rows],
            "Country": [countries[i % 3] for i in rows],
            "Year": [str(2015 + i % 8) for i in rows],
            "Sustainability_Rating": [ratings[i % 4] for i in rows],
            "Material_Type": [materials[i % 4] for i in rows],
            "Eco_Friendly_Manufacturing": ["Yes" if i % 2 else "No" for i in rows],
            "Carbon_Footprint_MT": [str(5 + (i * 37) % 90) for i in rows],
            "Water_Usage_Liters": [str(1000 + (i * 7919) % 50000) for i in rows],
            "Waste_Production_KG": [str(50 + (i * 431) % 5000) for i in rows],
            "Recycling_Programs": ["Yes" if i % 3 else "No" for i in rows],
            "Product_Lines": [str(1 + i % 10) for i in rows],
            "Average_Price_USD": [f"${20 + (i * 53) % 400}" for i in rows],
            "Market_Trend": ["Growing" if i % 2 else "Stable" for i in rows],
            "Certifications": ["GOTS" if i % 4 == 0 else "Fair Trade" for i in rows],
        }
    )
