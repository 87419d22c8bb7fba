from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from .models import CatalogItem, ContextEntry

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
MENU_CSV = _DATA_DIR / "menu.csv"

_df: pd.DataFrame | None = None
_catalog: list[CatalogItem] | None = None
_index: dict[str, CatalogItem] | None = None


class CatalogError(ValueError):
    """Raised when catalog input cannot be trusted (duplicate or unknown ids)."""


def _split_tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, str):
        return ()
    return tuple(t.strip() for t in value.split(",") if t.strip())


def _record_to_item(record: dict[str, Any]) -> CatalogItem:
    fields = {k: v for k, v in record.items() if v is not None and pd.notna(v)}
    fields["tags"] = _split_tags(record.get("tags"))
    return CatalogItem(**fields)


def read_menu(path: Path = MENU_CSV) -> pd.DataFrame:
    return pd.read_csv(path, dtype={"id": str, "tags": str, "description": str})


def load_catalog(path: Path = MENU_CSV) -> list[CatalogItem]:
    """Read the menu CSV and validate every row into a CatalogItem.

    Malformed rows raise pydantic's ValidationError and duplicate ids raise
    CatalogError, so nothing downstream has to re-check item shape.
    """
    df = read_menu(path)
    items: list[CatalogItem] = []
    seen: set[str] = set()
    for record in df.to_dict(orient="records"):
        item = _record_to_item(record)
        if item.id in seen:
            raise CatalogError(f"Duplicate catalog id: {item.id}")
        seen.add(item.id)
        items.append(item)
    logger.info("Loaded %d catalog items from %s", len(items), path)
    return items


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory menu DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = read_menu()
    return _df


def get_catalog() -> list[CatalogItem]:
    """Return the validated default menu, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = load_catalog()
    return _catalog


def _get_index() -> dict[str, CatalogItem]:
    global _index
    if _index is None:
        _index = {item.id: item for item in get_catalog()}
    return _index


def get_item(item_id: str) -> CatalogItem:
    try:
        return _get_index()[item_id]
    except KeyError:
        raise CatalogError(f"Unknown catalog id: {item_id}") from None


def resolve_entries(
    lines: Iterable[tuple[str, int]],
    catalog: list[CatalogItem] | None = None,
) -> list[ContextEntry]:
    """Turn ``(item_id, quantity)`` pairs into ContextEntry objects."""
    if catalog is None:
        lookup = get_item
    else:
        index = {item.id: item for item in catalog}

        def lookup(item_id: str) -> CatalogItem:
            if item_id not in index:
                raise CatalogError(f"Unknown catalog id: {item_id}")
            return index[item_id]

    return [ContextEntry(item=lookup(item_id), quantity=qty) for item_id, qty in lines]
