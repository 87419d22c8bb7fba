"""
Context building for suggestion scoring.

A SuggestionContext is the flattened, read-only view of a cart or an order
history that both scoring strategies consume: which items and categories are
present, how often each item was ordered, and which coarse meal signals
(burger, pizza, desi staple, Chinese, drink, ...) the context contains.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from ..catalog.models import CatalogItem, Category, ContextEntry
from .config import DEFAULT_SUGGESTION_CONFIG, SuggestionConfig
from .models import CartContext, HistoryContext

BURGER_WORDS = ("burger", "zinger")
PIZZA_WORDS = ("pizza",)
BIRYANI_WORDS = ("biryani",)
RICE_WORDS = ("rice", "pulao")
NOODLE_WORDS = ("noodle", "chow mein", "hakka", "chow")
CHINESE_WORDS = ("manchurian", "chow", "spring roll", "fried rice", "noodle")
FRIES_WORDS = ("fries", "loaded")
DESI_WORDS = ("biryani", "karahi", "nihari", "haleem")
DRINK_WORDS = ("drink", "cola", "shake", "juice", "lassi", "chai", "coffee", "soda")
COLD_DRINK_WORDS = ("shake", "juice", "cold", "lassi", "cola", "soda")
HOT_DRINK_WORDS = ("chai", "coffee", "tea")

# Meal families used for history keyword overlap: a user who orders from a
# family is nudged towards untried items whose names hit the family keywords.
FAMILY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "chinese": ("manchurian", "noodle", "chow", "spring", "fried rice"),
    "burger": ("burger", "zinger", "fries", "wings"),
    "desi": ("biryani", "karahi", "nihari", "haleem"),
    "pizza": ("pizza", "garlic"),
}


def _any_in(text: str, words: tuple[str, ...]) -> bool:
    return any(w in text for w in words)


def _is_sweet_sour(name: str) -> bool:
    return "sweet" in name and "sour" in name


def detect_signals(names: list[str], categories: set[Category]) -> frozenset[str]:
    """Detect coarse meal signals from lowercase item names and categories."""

    def has(words: tuple[str, ...]) -> bool:
        return any(_any_in(n, words) for n in names)

    signals: set[str] = set()
    if has(BURGER_WORDS):
        signals.add("burger")
    if has(PIZZA_WORDS):
        signals.add("pizza")
    if has(BIRYANI_WORDS):
        signals.add("biryani")
    if has(RICE_WORDS):
        signals.add("rice")
    if has(NOODLE_WORDS):
        signals.add("noodles")
    if has(FRIES_WORDS):
        signals.add("fries")
    if has(("spring",)):
        signals.add("spring_roll")
    if (
        Category.chinese in categories
        or has(CHINESE_WORDS)
        or any(_is_sweet_sour(n) for n in names)
    ):
        signals.add("chinese")
    if Category.desi_food in categories or has(DESI_WORDS):
        signals.add("desi")
    if Category.fast_food in categories or "burger" in signals or "pizza" in signals:
        signals.add("fast_food")
    if Category.beverages in categories or has(DRINK_WORDS):
        signals.add("drink")
    return frozenset(signals)


def item_traits(item: CatalogItem) -> frozenset[str]:
    """Classify a candidate item by what kind of pairing it can satisfy."""
    name = item.name.lower()
    traits: set[str] = set()
    if _any_in(name, FRIES_WORDS):
        traits.add("fries")
    if item.category == Category.beverages:
        traits.add("drink")
        if _any_in(name, COLD_DRINK_WORDS):
            traits.add("cold_drink")
        if _any_in(name, HOT_DRINK_WORDS):
            traits.add("hot_drink")
    if "spring" in name:
        traits.add("spring_roll")
    if _any_in(name, RICE_WORDS):
        traits.add("rice")
    if _any_in(name, ("noodle", "chow", "hakka")):
        traits.add("noodles")
    if _is_sweet_sour(name):
        traits.add("sweet_sour")
    if _any_in(name, ("wings", "nugget")):
        traits.add("wings")
    if "garlic" in name:
        traits.add("garlic")
    if "lassi" in name:
        traits.add("lassi")
    if _any_in(name, ("raita", "salad")):
        traits.add("raita")
    if _any_in(name, ("naan", "roti")):
        traits.add("bread")
    return frozenset(traits)


@dataclass(frozen=True)
class SuggestionContext:
    mode: str
    entries: tuple[ContextEntry, ...]
    names: tuple[str, ...]
    categories: frozenset[Category]
    item_units: dict[str, int] = field(default_factory=dict)
    category_units: dict[Category, int] = field(default_factory=dict)
    favorite_category: Category | None = None
    signals: frozenset[str] = frozenset()
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def has_ordered(self, item: CatalogItem) -> bool:
        return item.id in self.item_units

    def units_of(self, item: CatalogItem) -> int:
        return self.item_units.get(item.id, 0)

    def is_near_duplicate(self, item: CatalogItem) -> bool:
        name = item.name.lower()
        return any(name in n or n in name for n in self.names)

    def liked_families(self) -> list[str]:
        return [f for f in FAMILY_KEYWORDS if f in self.signals]


def _summarize(
    mode: str,
    entries: list[ContextEntry],
    text: str,
) -> SuggestionContext:
    names = [e.item.name.lower() for e in entries]
    categories = {e.item.category for e in entries}

    item_units: Counter[str] = Counter()
    category_units: Counter[Category] = Counter()
    for e in entries:
        item_units[e.item.id] += e.quantity
        category_units[e.item.category] += e.quantity

    # most_common keeps first-seen order among ties
    favorite = category_units.most_common(1)[0][0] if category_units else None

    return SuggestionContext(
        mode=mode,
        entries=tuple(entries),
        names=tuple(dict.fromkeys(names)),
        categories=frozenset(categories),
        item_units=dict(item_units),
        category_units=dict(category_units),
        favorite_category=favorite,
        signals=detect_signals(names, categories),
        text=text,
    )


def build_context(
    request: CartContext | HistoryContext,
    config: SuggestionConfig = DEFAULT_SUGGESTION_CONFIG,
) -> SuggestionContext:
    if isinstance(request, CartContext):
        text = ", ".join(e.item.text for e in request.entries)
        return _summarize("cart", list(request.entries), text)

    orders = [order for order in request.past_orders if order]
    entries = [e for order in orders for e in order]
    text = " | ".join(
        ", ".join(e.item.text for e in order)
        for order in orders[: config.history_context_orders]
    )
    return _summarize("history", entries, text)


def filter_candidates(
    context: SuggestionContext,
    catalog: list[CatalogItem],
    config: SuggestionConfig = DEFAULT_SUGGESTION_CONFIG,
) -> list[CatalogItem]:
    """Drop unavailable items and items the context already covers.

    Cart mode drops anything in the cart. History mode only drops items
    ordered at least ``exclude_repeat_threshold`` units; items ordered less
    often stay eligible for the reorder bonus.
    """
    candidates: list[CatalogItem] = []
    for item in catalog:
        if not item.is_available:
            continue
        if context.mode == "cart" and context.has_ordered(item):
            continue
        if context.mode == "history" and context.units_of(item) >= config.exclude_repeat_threshold:
            continue
        candidates.append(item)
    return candidates
