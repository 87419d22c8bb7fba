from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from bitesbuzz.catalog import data_store
from bitesbuzz.catalog.data_store import (
    CatalogError,
    get_item,
    load_catalog,
    resolve_entries,
)
from bitesbuzz.catalog.models import CatalogItem, Category

HEADER = (
    "id,name,category,price,discount_price,rating,reviews,tags,description,"
    "is_available,is_seasonal,is_promotional\n"
)


def _write_menu(tmp_path: Path, *rows: str) -> Path:
    path = tmp_path / "menu.csv"
    path.write_text(HEADER + "\n".join(rows) + "\n", encoding="utf-8")
    return path


def test_default_menu_loads():
    items = load_catalog()
    assert len(items) == 24
    assert len({item.id for item in items}) == len(items)
    assert {item.category for item in items} == set(Category)


def test_menu_row_fields():
    karahi = get_item("d2")
    assert karahi.name == "Chicken Karahi"
    assert karahi.category == Category.desi_food
    assert karahi.effective_price == 499
    assert karahi.has_discount
    assert karahi.discount_percentage == 9
    assert karahi.tags == ("spicy", "gravy")
    assert karahi.is_promotional

    biryani = get_item("d1")
    assert biryani.discount_price is None
    assert biryani.effective_price == 350


def test_item_text_joins_name_category_tags():
    item = CatalogItem(id="x", name="Mango Shake", category=Category.beverages, price=1, tags=("cold",))
    assert item.text == "Mango Shake Beverages cold"


def test_unavailable_items_still_load():
    assert get_item("b5").is_available is False


def test_rating_out_of_range_rejected(tmp_path: Path):
    path = _write_menu(tmp_path, "x1,Mystery,Snacks,100,,6.5,10,,,True,False,False")
    with pytest.raises(ValidationError):
        load_catalog(path)


def test_negative_price_rejected():
    with pytest.raises(ValidationError):
        CatalogItem(id="x", name="Free", category=Category.snacks, price=-1)


def test_unknown_category_rejected(tmp_path: Path):
    path = _write_menu(tmp_path, "x1,Pasta,Italian,100,,4.0,10,,,True,False,False")
    with pytest.raises(ValidationError):
        load_catalog(path)


def test_duplicate_ids_rejected(tmp_path: Path):
    path = _write_menu(
        tmp_path,
        "x1,Samosa,Snacks,40,,4.0,10,,,True,False,False",
        "x1,Pakora,Snacks,60,,4.1,10,,,True,False,False",
    )
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_items_are_immutable():
    item = get_item("f1")
    with pytest.raises(ValidationError):
        item.price = 1


def test_resolve_entries():
    entries = resolve_entries([("f1", 2), ("b1", 1)])
    assert [(e.item.id, e.quantity) for e in entries] == [("f1", 2), ("b1", 1)]


def test_resolve_entries_unknown_id():
    with pytest.raises(CatalogError):
        resolve_entries([("nope", 1)])
    with pytest.raises(CatalogError):
        get_item("nope")


def test_resolve_entries_against_given_catalog():
    catalog = [CatalogItem(id="x", name="Tea", category=Category.beverages, price=50)]
    assert resolve_entries([("x", 1)], catalog)[0].item.name == "Tea"
    with pytest.raises(CatalogError):
        resolve_entries([("f1", 1)], catalog)


def test_zero_quantity_rejected():
    with pytest.raises(ValidationError):
        resolve_entries([("f1", 0)])


def test_get_item_loads_menu_on_first_lookup(monkeypatch):
    monkeypatch.setattr(data_store, "_catalog", None)
    monkeypatch.setattr(data_store, "_index", None)

    assert get_item("c4").name == "Spring Rolls"
    assert data_store._catalog is not None
    assert len(data_store._index) == 24
