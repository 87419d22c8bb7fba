from __future__ import annotations

import pytest

from bitesbuzz.catalog.models import CatalogItem, Category, ContextEntry
from bitesbuzz.suggestions.config import DEFAULT_SUGGESTION_CONFIG as CFG
from bitesbuzz.suggestions.context import build_context, detect_signals, item_traits
from bitesbuzz.suggestions.models import CartContext, HistoryContext
from bitesbuzz.suggestions.rules import RuleBasedStrategy, rank, select_message


def _item(item_id: str, name: str, category: Category, rating: float = 4.0, **kwargs) -> CatalogItem:
    return CatalogItem(id=item_id, name=name, category=category, price=200.0, rating=rating, **kwargs)


ZINGER = _item("f1", "Zinger Burger", Category.fast_food, 4.6)
BEEF_BURGER = _item("f2", "Beef Burger", Category.fast_food, 4.3)
CHICKEN_BURGER = _item("f7", "Chicken Burger", Category.fast_food, 4.6)
PIZZA = _item("f3", "Chicken Pizza", Category.fast_food, 4.5)
FRIES = _item("f5", "French Fries", Category.snacks, 4.4)
SHAKE = _item("b1", "Mango Shake", Category.beverages, 4.7)
COKE = _item("b6", "Coke", Category.beverages, 4.0)
CHAI = _item("b3", "Doodh Patti Chai", Category.beverages, 4.5)
LASSI = _item("b2", "Sweet Lassi", Category.beverages, 4.6)
BIRYANI = _item("d1", "Chicken Biryani", Category.desi_food, 4.7)
RAITA = _item("d6", "Mint Raita", Category.desi_food, 4.0)
NAAN = _item("d5", "Garlic Naan", Category.desi_food, 4.3)
MANCHURIAN = _item("c1", "Chicken Manchurian", Category.chinese, 4.5)
SPRING_ROLLS = _item("c4", "Spring Rolls", Category.chinese, 4.2)
FRIED_RICE = _item("c2", "Egg Fried Rice", Category.chinese, 4.3)

rules = RuleBasedStrategy()


def _cart(*items: CatalogItem):
    return build_context(CartContext(entries=[ContextEntry(item=i) for i in items]))


def _history(*orders: list[tuple[CatalogItem, int]]):
    return build_context(
        HistoryContext(
            past_orders=[[ContextEntry(item=i, quantity=q) for i, q in order] for order in orders]
        )
    )


# ── Signals ──────────────────────────────────────────────────────────────


class TestSignals:
    def test_burger_name_implies_fast_food(self):
        signals = detect_signals(["zinger burger"], set())
        assert {"burger", "fast_food"} <= signals
        assert "drink" not in signals

    def test_drink_detected_by_name_or_category(self):
        assert "drink" in detect_signals(["cold coffee"], set())
        assert "drink" in detect_signals(["coke"], {Category.beverages})

    def test_chinese_detected_by_dish_name(self):
        assert "chinese" in detect_signals(["chicken chow mein"], {Category.fast_food})

    def test_item_traits(self):
        assert "cold_drink" in item_traits(SHAKE)
        assert "hot_drink" in item_traits(CHAI)
        assert "fries" in item_traits(FRIES)
        assert "bread" in item_traits(NAAN)
        assert "drink" not in item_traits(FRIES)


# ── Cart scoring ─────────────────────────────────────────────────────────


class TestCartScoring:
    def test_burger_pairs_with_fries_and_drink_over_biryani(self):
        ctx = _cart(ZINGER)
        fries = rules.score_candidate(ctx, FRIES)
        shake = rules.score_candidate(ctx, SHAKE)
        biryani = rules.score_candidate(ctx, BIRYANI)
        assert fries > biryani
        assert shake > biryani

    def test_drink_bonuses_only_when_no_drink_in_cart(self):
        without_drink = rules.score_candidate(_cart(ZINGER), SHAKE)
        with_drink = rules.score_candidate(_cart(ZINGER, COKE), SHAKE)
        expected_gap = CFG.burger_cold_drink_bonus + CFG.drink_completeness_bonus + CFG.variety_bonus
        assert without_drink - with_drink == pytest.approx(expected_gap)

    def test_variety_bonus_for_new_category(self):
        ctx = _cart(BIRYANI)
        snack = _item("s9", "Plain Crackers", Category.snacks, 4.0)
        desi = _item("d9", "Plain Daal", Category.desi_food, 4.0)
        assert rules.score_candidate(ctx, snack) - rules.score_candidate(ctx, desi) == pytest.approx(
            CFG.variety_bonus
        )

    def test_rating_contribution_is_linear(self):
        ctx = _cart(BIRYANI)
        low = _item("s1", "Plain Crackers", Category.snacks, 2.0)
        high = _item("s2", "Plain Biscuits", Category.snacks, 4.0)
        gap = rules.score_candidate(ctx, high) - rules.score_candidate(ctx, low)
        assert gap == pytest.approx(2.0 * CFG.cart_rating_weight)

    def test_near_duplicate_drops_below_zero(self):
        deluxe = _item("f8", "Zinger Burger Deluxe", Category.fast_food, 5.0)
        assert rules.score_candidate(_cart(ZINGER), deluxe) < 0

    def test_desi_meal_prefers_lassi_raita_naan(self):
        ctx = _cart(BIRYANI)
        scored = [(i, rules.score_candidate(ctx, i)) for i in [FRIES, LASSI, RAITA, NAAN, PIZZA]]
        top = [i.id for i, _ in rank(scored, 3)]
        assert top == ["b2", "d6", "d5"]

    def test_chinese_meal_prefers_spring_rolls(self):
        ctx = _cart(MANCHURIAN)
        scored = [(i, rules.score_candidate(ctx, i)) for i in [FRIES, FRIED_RICE, SPRING_ROLLS, BIRYANI]]
        assert rank(scored, 1)[0][0] is SPRING_ROLLS

    def test_scoring_is_deterministic(self):
        ctx = _cart(ZINGER, BIRYANI)
        first = [rules.score_candidate(ctx, i) for i in [FRIES, SHAKE, RAITA]]
        second = [rules.score_candidate(ctx, i) for i in [FRIES, SHAKE, RAITA]]
        assert first == second


# ── History scoring ──────────────────────────────────────────────────────


class TestHistoryScoring:
    def test_bonus_constants_keep_novelty_ahead_of_reorders(self):
        assert CFG.unvisited_favorite_bonus > CFG.reorder_bonus > CFG.reorder_once_bonus
        assert CFG.reorder_threshold < CFG.exclude_repeat_threshold

    def test_unvisited_favorite_beats_reorder(self):
        ctx = _history([(BEEF_BURGER, 3), (COKE, 1)])
        assert ctx.favorite_category == Category.fast_food
        assert rules.score_candidate(ctx, CHICKEN_BURGER) > rules.score_candidate(ctx, BEEF_BURGER)

    def test_reorder_bonus_scales_with_repetition(self):
        ctx = _history([(BEEF_BURGER, 2), (COKE, 1)])
        beef = rules.score_candidate(ctx, BEEF_BURGER)
        coke = rules.score_candidate(ctx, COKE)
        assert beef == pytest.approx(CFG.reorder_bonus + BEEF_BURGER.rating * CFG.history_rating_weight)
        assert coke == pytest.approx(CFG.reorder_once_bonus + COKE.rating * CFG.history_rating_weight)

    def test_keyword_overlap_with_liked_family(self):
        ctx = _history([(BEEF_BURGER, 1)], [(BIRYANI, 1)])
        burgerish = _item("f9", "Double Zinger", Category.snacks, 4.0)
        plain = _item("s9", "Plain Crackers", Category.snacks, 4.0)
        gap = rules.score_candidate(ctx, burgerish) - rules.score_candidate(ctx, plain)
        assert gap == pytest.approx(CFG.keyword_overlap_bonus)


# ── Ranking & messages ───────────────────────────────────────────────────


class TestRank:
    def test_drops_non_positive_and_caps(self):
        scored = [(FRIES, 0.0), (SHAKE, -3.0), (BIRYANI, 2.0), (RAITA, 5.0), (NAAN, 1.0), (CHAI, 4.0), (LASSI, 3.0)]
        ranked = rank(scored, 4)
        assert [i.id for i, _ in ranked] == ["d6", "b3", "b2", "d1"]
        assert all(score > 0 for _, score in ranked)

    def test_ties_keep_input_order(self):
        ranked = rank([(FRIES, 1.0), (SHAKE, 2.0), (BIRYANI, 1.0), (RAITA, 1.0)], 4)
        assert [i.id for i, _ in ranked] == ["b1", "f5", "d1", "d6"]


class TestMessages:
    def test_burger_without_sides(self):
        assert "fries and a cold drink" in select_message(_cart(ZINGER))

    def test_burger_with_fries_needs_drink(self):
        assert "drink" in select_message(_cart(ZINGER, FRIES))

    def test_chinese_takes_priority(self):
        assert "Chinese" in select_message(_cart(ZINGER, MANCHURIAN))

    def test_drinks_only_cart_asks_for_variety(self):
        assert "Mix it up" in select_message(_cart(COKE, CHAI))

    def test_history_message_names_favorite_category(self):
        snack = _item("s1", "Vegetable Samosa", Category.snacks)
        assert select_message(_history([(snack, 2)])) == "✨ Since you love Snacks, try these!"
