from __future__ import annotations

from ..catalog.models import CatalogItem, Category
from .config import DEFAULT_SUGGESTION_CONFIG, SuggestionConfig
from .context import FAMILY_KEYWORDS, SuggestionContext, item_traits

EMPTY_CART_MESSAGE = "Add items to your cart to get personalized suggestions!"
CART_EXHAUSTED_MESSAGE = "You've added everything! Great choices!"
HISTORY_EXHAUSTED_MESSAGE = "Nothing new to suggest right now. Check out the full menu!"
POPULAR_PICKS_MESSAGE = "🌟 Popular picks to get you started!"


class RuleBasedStrategy:
    """Additive heuristic scorer built from many small pairing rules."""

    is_semantic = False

    def __init__(self, config: SuggestionConfig = DEFAULT_SUGGESTION_CONFIG) -> None:
        self.config = config

    def score_candidate(self, context: SuggestionContext, item: CatalogItem) -> float:
        if context.mode == "history":
            return self._score_history(context, item)
        return self._score_cart(context, item)

    def _score_cart(self, context: SuggestionContext, item: CatalogItem) -> float:
        cfg = self.config
        signals = context.signals
        traits = item_traits(item)
        no_drink = "drink" not in signals
        score = 0.0

        if "chinese" in signals or "noodles" in signals:
            if "spring_roll" in traits and "spring_roll" not in signals:
                score += cfg.chinese_spring_roll_bonus
            if "rice" in traits and item.category == Category.chinese and "rice" not in signals:
                score += cfg.chinese_rice_bonus
            if "noodles" in traits and "noodles" not in signals:
                score += cfg.chinese_noodle_bonus
            if "sweet_sour" in traits:
                score += cfg.chinese_sweet_sour_bonus
            if item.category == Category.chinese:
                score += cfg.chinese_same_cuisine_bonus
            if "cold_drink" in traits and no_drink:
                score += cfg.chinese_cold_drink_bonus

        if "burger" in signals:
            if "fries" in traits and "fries" not in signals:
                score += cfg.burger_fries_bonus
            if "cold_drink" in traits and no_drink:
                score += cfg.burger_cold_drink_bonus
            if "wings" in traits:
                score += cfg.burger_side_bonus

        if "pizza" in signals:
            if "cold_drink" in traits and no_drink:
                score += cfg.pizza_cold_drink_bonus
            if "wings" in traits or "garlic" in traits:
                score += cfg.pizza_side_bonus
            if "fries" in traits and "fries" not in signals:
                score += cfg.pizza_fries_bonus

        if "desi" in signals:
            if "lassi" in traits:
                score += cfg.desi_lassi_bonus
            if "raita" in traits:
                score += cfg.desi_raita_bonus
            if "bread" in traits:
                score += cfg.desi_bread_bonus
            if "hot_drink" in traits:
                score += cfg.desi_hot_drink_bonus

        if "fast_food" in signals and "fries" in traits and "fries" not in signals:
            score += cfg.fast_food_fries_bonus
        if no_drink and "drink" in traits:
            score += cfg.drink_completeness_bonus

        score += item.rating * cfg.cart_rating_weight

        if item.category not in context.categories:
            score += cfg.variety_bonus
        if context.is_near_duplicate(item):
            score -= cfg.redundancy_penalty
        return score

    def _score_history(self, context: SuggestionContext, item: CatalogItem) -> float:
        cfg = self.config
        name = item.name.lower()
        tried = context.has_ordered(item)
        score = 0.0

        if not tried:
            if item.category == context.favorite_category:
                score += cfg.unvisited_favorite_bonus
            for family in context.liked_families():
                if any(w in name for w in FAMILY_KEYWORDS[family]):
                    score += cfg.keyword_overlap_bonus
            if item.rating >= cfg.top_rated_threshold:
                score += cfg.top_rated_untried_bonus
        elif context.units_of(item) >= cfg.reorder_threshold:
            score += cfg.reorder_bonus
        else:
            score += cfg.reorder_once_bonus

        score += item.rating * cfg.history_rating_weight
        return score


def rank(
    scored: list[tuple[CatalogItem, float]],
    limit: int,
) -> list[tuple[CatalogItem, float]]:
    """Keep strictly positive scores, highest first; ties keep input order."""
    eligible = [(item, score) for item, score in scored if score > 0]
    eligible.sort(key=lambda pair: pair[1], reverse=True)
    return eligible[:limit]


def exhausted_message(context: SuggestionContext) -> str:
    return CART_EXHAUSTED_MESSAGE if context.mode == "cart" else HISTORY_EXHAUSTED_MESSAGE


def select_message(context: SuggestionContext) -> str:
    """Pick the advisory message for the most salient signal or gap."""
    if context.mode == "history":
        return _history_message(context)

    signals = context.signals
    burger, fries, drink = "burger" in signals, "fries" in signals, "drink" in signals
    if "chinese" in signals or "noodles" in signals:
        return "🥢 Complete your Chinese meal with these!"
    if burger and not fries and not drink:
        return "🍟 Complete your burger meal with fries and a cold drink!"
    if burger and not fries:
        return "🍟 Your burger needs some crispy fries!"
    if burger and not drink:
        return "🥤 Don't forget a refreshing drink with your burger!"
    if "pizza" in signals:
        return "🍕 Perfect sides to go with your pizza!"
    if "desi" in signals:
        return "🍚 Complete your desi meal with these!"
    if not drink:
        return "🥤 Add a drink to complete your order!"
    if len(context.categories) == 1 and len(context.names) > 1:
        return "✨ Mix it up with something different!"
    return "✨ You might also like these!"


def _history_message(context: SuggestionContext) -> str:
    signals = context.signals
    if "chinese" in signals:
        return "🥢 Based on your love for Chinese food, try these!"
    if "burger" in signals:
        return "🍔 Since you enjoy burgers, you might like these!"
    if "desi" in signals:
        return "🍛 Based on your desi food orders, try these!"
    if "pizza" in signals:
        return "🍕 Pizza lover? Check out these recommendations!"
    if context.favorite_category is not None:
        return f"✨ Since you love {context.favorite_category.value}, try these!"
    return "🌟 Recommended just for you!"
