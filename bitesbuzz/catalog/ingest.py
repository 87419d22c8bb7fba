from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

import pandas as pd

from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from .models import Category

logger = logging.getLogger(__name__)


CANONICAL_COLUMNS: List[str] = [
    "id",
    "name",
    "category",
    "price",
    "discount_price",
    "rating",
    "reviews",
    "tags",
    "description",
    "is_available",
    "is_seasonal",
    "is_promotional",
]

# Raw export field -> canonical column
_FIELD_MAP: dict[str, str] = {
    "id": "id",
    "name": "name",
    "category": "category",
    "price": "price",
    "discountPrice": "discount_price",
    "rating": "rating",
    "reviews": "reviews",
    "tags": "tags",
    "description": "description",
    "isAvailable": "is_available",
    "isSeasonal": "is_seasonal",
    "isPromotional": "is_promotional",
}

_DEFAULTS: dict[str, Any] = {
    "price": 0.0,
    "rating": 0.0,
    "reviews": 0,
    "description": "",
    "is_available": True,
    "is_seasonal": False,
    "is_promotional": False,
}

_CATEGORIES = {c.value for c in Category}


def _normalize_rating(rating: Any) -> float:
    try:
        value = float(rating)
    except (TypeError, ValueError):
        return 0.0
    # Clamp to [0, 5]
    return max(0.0, min(5.0, value))


def _join_tags(tags: Any) -> str:
    if isinstance(tags, str):
        return tags
    if not isinstance(tags, list):
        return ""
    return ",".join(str(t).strip() for t in tags if str(t).strip())


def _read_export(path: Path) -> list[dict[str, Any]]:
    """Accept either a list of documents or a ``{doc_id: document}`` mapping."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        return [{"id": doc_id, **doc} for doc_id, doc in raw.items()]
    return list(raw)


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Normalize a raw menu export into the canonical menu CSV.

    Steps:
    - Read the exported food item documents.
    - Map camelCase fields onto canonical columns, filling defaults.
    - Drop rows without a name or with an unknown category.
    - Persist the cleaned menu as CSV.
    """
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    docs = _read_export(config.raw_export_path)
    df = pd.DataFrame(docs)

    canonical = pd.DataFrame(index=df.index)
    for raw_col, col in _FIELD_MAP.items():
        if raw_col in df.columns:
            canonical[col] = df[raw_col]
        else:
            canonical[col] = _DEFAULTS.get(col)

    for col, default in _DEFAULTS.items():
        canonical[col] = canonical[col].where(canonical[col].notna(), default)

    canonical["id"] = canonical["id"].astype(str)
    canonical["price"] = pd.to_numeric(canonical["price"], errors="coerce").fillna(0.0)
    canonical["discount_price"] = pd.to_numeric(canonical["discount_price"], errors="coerce")
    canonical["rating"] = canonical["rating"].apply(_normalize_rating)
    canonical["reviews"] = pd.to_numeric(canonical["reviews"], errors="coerce").fillna(0).astype(int)
    canonical["tags"] = canonical["tags"].apply(_join_tags)

    valid = canonical["name"].fillna("").astype(str).str.strip().ne("") & canonical[
        "category"
    ].isin(_CATEGORIES)
    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropping %d menu documents with no name or unknown category", dropped)
    canonical = canonical.loc[valid, CANONICAL_COLUMNS]

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    return output_path


if __name__ == "__main__":
    path = run_ingestion()
    print(f"Ingestion complete. Menu saved to: {path}")
