from __future__ import annotations

import logging
from collections import Counter

from ..catalog.models import CatalogItem, ContextEntry

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: dict[str, float] = {
    "category": 0.4,
    "rating": 0.3,
    "promotional": 0.2,
    "seasonal": 0.1,
    "same_category": 0.15,
    "shared_tag": 0.05,
}

MAX_LINES_BEFORE_SKIP = 2
SIMILAR_PRICE_WINDOW = 50.0
SIMILARITY_THRESHOLD = 0.3


def _available(catalog: list[CatalogItem]) -> list[CatalogItem]:
    return [item for item in catalog if item.is_available]


def popular_items(catalog: list[CatalogItem], limit: int = 10) -> list[CatalogItem]:
    """Available items ordered by ``rating * reviews``, highest first."""
    items = _available(catalog)
    items.sort(key=lambda item: item.rating * item.reviews, reverse=True)
    return items[:limit]


def trending_items(catalog: list[CatalogItem], limit: int = 10) -> list[CatalogItem]:
    return [item for item in _available(catalog) if item.is_promotional][:limit]


def _score_item(
    item: CatalogItem,
    category_lines: Counter[str],
    order_count: int,
    ordered: dict[str, CatalogItem],
    weights: dict[str, float],
) -> float:
    """Compute a weighted preference score for a single menu item."""
    w = weights
    score = w["category"] * category_lines[item.category.value] / order_count
    score += w["rating"] * item.rating / 5.0
    if item.is_promotional:
        score += w["promotional"]
    if item.is_seasonal:
        score += w["seasonal"]

    for other in ordered.values():
        if other.id != item.id and other.category == item.category:
            score += w["same_category"]
        shared = sum(1 for tag in item.tags if tag in other.tags)
        score += shared * w["shared_tag"]
    return score


def personalized_recommendations(
    past_orders: list[list[ContextEntry]],
    catalog: list[CatalogItem],
    limit: int = 10,
    weights: dict[str, float] | None = None,
) -> list[CatalogItem]:
    """Rank the menu by how well each item fits the user's order history.

    Items that already show up on more than two order lines are skipped.
    With no history at all, this is the popular list.
    """
    orders = [order for order in past_orders if order]
    if not orders:
        return popular_items(catalog, limit)

    w = {**DEFAULT_WEIGHTS, **(weights or {})}
    item_lines: Counter[str] = Counter()
    category_lines: Counter[str] = Counter()
    ordered: dict[str, CatalogItem] = {}
    for order in orders:
        for entry in order:
            item_lines[entry.item.id] += 1
            category_lines[entry.item.category.value] += 1
            ordered[entry.item.id] = entry.item

    scored: list[tuple[CatalogItem, float]] = []
    for item in _available(catalog):
        if item_lines[item.id] > MAX_LINES_BEFORE_SKIP:
            continue
        scored.append((item, _score_item(item, category_lines, len(orders), ordered, w)))

    scored.sort(key=lambda pair: pair[1], reverse=True)
    logger.debug("Scored %d items for personalized recommendations", len(scored))
    return [item for item, _ in scored[:limit]]


def similar_items(
    item: CatalogItem,
    catalog: list[CatalogItem],
    limit: int = 5,
) -> list[CatalogItem]:
    """Items sharing category, price range and tags with ``item``."""
    scored: list[tuple[CatalogItem, float]] = []
    for other in _available(catalog):
        if other.id == item.id:
            continue

        similarity = 0.0
        if other.category == item.category:
            similarity += 0.5
        if abs(other.effective_price - item.effective_price) < SIMILAR_PRICE_WINDOW:
            similarity += 0.2
        if item.tags:
            shared = sum(1 for tag in other.tags if tag in item.tags)
            similarity += shared / len(item.tags) * 0.3

        if similarity > SIMILARITY_THRESHOLD:
            scored.append((other, similarity))

    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [other for other, _ in scored[:limit]]
