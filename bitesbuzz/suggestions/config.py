"""
Tunable constants for suggestion scoring.

The bonus values are hand-tuned, not learned. Rule-based bonuses are on a
point scale (a strong pairing is worth 10-15 points); semantic blend terms are
on the cosine-similarity scale, so they stay small.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SuggestionConfig:
    max_suggestions: int = 4

    # History candidate filtering
    exclude_repeat_threshold: int = 3
    reorder_threshold: int = 2
    history_context_orders: int = 5

    # Cart pairing: Chinese / noodles
    chinese_spring_roll_bonus: float = 15.0
    chinese_rice_bonus: float = 12.0
    chinese_noodle_bonus: float = 10.0
    chinese_sweet_sour_bonus: float = 8.0
    chinese_same_cuisine_bonus: float = 6.0
    chinese_cold_drink_bonus: float = 5.0

    # Cart pairing: burgers
    burger_fries_bonus: float = 12.0
    burger_cold_drink_bonus: float = 10.0
    burger_side_bonus: float = 6.0

    # Cart pairing: pizza
    pizza_cold_drink_bonus: float = 10.0
    pizza_side_bonus: float = 8.0
    pizza_fries_bonus: float = 6.0

    # Cart pairing: desi staples
    desi_lassi_bonus: float = 12.0
    desi_raita_bonus: float = 10.0
    desi_bread_bonus: float = 8.0
    desi_hot_drink_bonus: float = 5.0

    # Cart general rules
    fast_food_fries_bonus: float = 8.0
    drink_completeness_bonus: float = 4.0
    variety_bonus: float = 2.0
    redundancy_penalty: float = 100.0
    cart_rating_weight: float = 0.3

    # History rules
    unvisited_favorite_bonus: float = 15.0
    keyword_overlap_bonus: float = 12.0
    top_rated_untried_bonus: float = 8.0
    top_rated_threshold: float = 4.5
    reorder_bonus: float = 5.0
    reorder_once_bonus: float = 2.0
    history_rating_weight: float = 0.5

    # Semantic blend terms
    semantic_variety_bonus: float = 0.1
    semantic_drink_bonus: float = 0.15
    semantic_unvisited_bonus: float = 0.2
    semantic_rating_weight: float = 0.02


DEFAULT_SUGGESTION_CONFIG = SuggestionConfig()
