import json
from pathlib import Path

import pandas as pd

from bitesbuzz.catalog.config import IngestionConfig
from bitesbuzz.catalog.data_store import load_catalog
from bitesbuzz.catalog.ingest import CANONICAL_COLUMNS, run_ingestion

EXPORT_DOCS = [
    {
        "id": "d1",
        "name": "Chicken Biryani",
        "category": "Desi Food",
        "price": 350,
        "rating": 4.7,
        "reviews": 210,
        "tags": ["spicy", "rice"],
        "isAvailable": True,
    },
    {
        "id": "b1",
        "name": "Mango Shake",
        "category": "Beverages",
        "price": 220,
        "discountPrice": 199,
        "rating": 7.2,
        "tags": ["cold"],
        "isSeasonal": True,
        "isPromotional": True,
    },
    {"id": "x1", "name": "", "category": "Snacks", "price": 10},
    {"id": "x2", "name": "Pasta", "category": "Italian", "price": 500},
]


def _config(tmp_path: Path, docs) -> IngestionConfig:
    raw = tmp_path / "raw" / "food_items.json"
    raw.parent.mkdir(parents=True)
    raw.write_text(json.dumps(docs), encoding="utf-8")
    return IngestionConfig(raw_export_path=raw, processed_data_dir=tmp_path / "processed")


def test_run_ingestion_creates_canonical_menu(tmp_path: Path):
    """
    End-to-end ingestion of a list-shaped export.

    Uses a temporary output directory so we don't pollute the bundled menu.
    """
    output_path = run_ingestion(config=_config(tmp_path, EXPORT_DOCS))

    assert output_path.is_file(), "Processed CSV should be created"

    df = pd.read_csv(output_path)
    assert list(df.columns) == CANONICAL_COLUMNS
    assert df["id"].tolist() == ["d1", "b1"], "Nameless and unknown-category rows are dropped"


def test_ingested_menu_loads_as_catalog(tmp_path: Path):
    output_path = run_ingestion(config=_config(tmp_path, EXPORT_DOCS))

    items = {item.id: item for item in load_catalog(output_path)}

    assert items["d1"].tags == ("spicy", "rice")
    assert items["d1"].is_available is True
    assert items["b1"].rating == 5.0, "Ratings are clamped to [0, 5]"
    assert items["b1"].effective_price == 199
    assert items["b1"].is_seasonal and items["b1"].is_promotional
    assert items["b1"].reviews == 0


def test_run_ingestion_accepts_keyed_export(tmp_path: Path):
    keyed = {
        "c1": {"name": "Chicken Manchurian", "category": "Chinese", "price": 480, "rating": 4.5},
        "c4": {"name": "Spring Rolls", "category": "Chinese", "price": 200},
    }

    output_path = run_ingestion(config=_config(tmp_path, keyed))

    items = load_catalog(output_path)
    assert [item.id for item in items] == ["c1", "c4"]
    assert items[1].rating == 0.0
