from __future__ import annotations

import logging
import threading
from typing import Protocol

from ..catalog.models import CatalogItem
from ..embeddings.cache import EmbeddingCache
from ..embeddings.config import DEFAULT_EMBEDDING_CONFIG, EmbeddingConfig
from ..embeddings.provider import EmbeddingUnavailable, HuggingFaceInferenceProvider
from .config import DEFAULT_SUGGESTION_CONFIG, SuggestionConfig
from .context import SuggestionContext, build_context, filter_candidates
from .models import CartContext, HistoryContext, SuggestionResult
from .rules import (
    EMPTY_CART_MESSAGE,
    POPULAR_PICKS_MESSAGE,
    RuleBasedStrategy,
    exhausted_message,
    rank,
    select_message,
)
from .semantic import SemanticStrategy

logger = logging.getLogger(__name__)


class ScoringStrategy(Protocol):
    is_semantic: bool

    def score_candidate(self, context: SuggestionContext, item: CatalogItem) -> float: ...


class SuggestionEngine:
    """Ranks menu items against a cart or an order history.

    The semantic strategy is preferred when one is configured; any failure on
    that path discards it for the call and the rule-based strategy answers
    instead, so a result never mixes provenance.
    """

    def __init__(
        self,
        config: SuggestionConfig = DEFAULT_SUGGESTION_CONFIG,
        semantic: SemanticStrategy | None = None,
    ) -> None:
        self.config = config
        self.rules: ScoringStrategy = RuleBasedStrategy(config)
        self.semantic = semantic

    def suggest(
        self,
        request: CartContext | HistoryContext,
        catalog: list[CatalogItem],
        cancel: threading.Event | None = None,
    ) -> SuggestionResult:
        context = build_context(request, self.config)

        if context.is_empty:
            if context.mode == "cart":
                return SuggestionResult(message=EMPTY_CART_MESSAGE)
            return self._popular_picks(catalog)

        candidates = filter_candidates(context, catalog, self.config)
        if not candidates:
            return SuggestionResult(message=exhausted_message(context))

        if self.semantic is not None:
            try:
                scored = self.semantic.score_candidates(context, candidates, cancel=cancel)
            except EmbeddingUnavailable:
                logger.warning(
                    "Semantic scoring unavailable, falling back to rule-based suggestions",
                    exc_info=True,
                )
            else:
                ranked = rank(scored, self.config.max_suggestions)
                if ranked:
                    return self._result(context, ranked, is_semantic=True)
                logger.info("No positive semantic scores, falling back to rule-based suggestions")

        scored = [(item, self.rules.score_candidate(context, item)) for item in candidates]
        ranked = rank(scored, self.config.max_suggestions)
        return self._result(context, ranked, is_semantic=False)

    def _result(
        self,
        context: SuggestionContext,
        ranked: list[tuple[CatalogItem, float]],
        is_semantic: bool,
    ) -> SuggestionResult:
        if not ranked:
            return SuggestionResult(message=exhausted_message(context), is_semantic=is_semantic)
        return SuggestionResult(
            items=[item for item, _ in ranked],
            scores=[score for _, score in ranked],
            message=select_message(context),
            is_semantic=is_semantic,
        )

    def _popular_picks(self, catalog: list[CatalogItem]) -> SuggestionResult:
        popular = [
            (item, item.rating)
            for item in catalog
            if item.is_available and item.rating >= self.config.top_rated_threshold
        ]
        ranked = rank(popular, self.config.max_suggestions)
        if not ranked:
            return SuggestionResult(message="Check out our menu for delicious options!")
        return SuggestionResult(
            items=[item for item, _ in ranked],
            scores=[score for _, score in ranked],
            message=POPULAR_PICKS_MESSAGE,
        )


def build_engine(
    config: SuggestionConfig = DEFAULT_SUGGESTION_CONFIG,
    embedding_config: EmbeddingConfig = DEFAULT_EMBEDDING_CONFIG,
) -> SuggestionEngine:
    """Build an engine, enabling the semantic path only when an API key is set."""
    if not embedding_config.enabled or not embedding_config.api_key:
        logger.info("Embedding provider not configured, using rule-based suggestions only")
        return SuggestionEngine(config)

    cache = EmbeddingCache(max_size=embedding_config.cache_size)
    if embedding_config.precomputed_path.exists():
        cache.load(embedding_config.precomputed_path)
    semantic = SemanticStrategy(
        HuggingFaceInferenceProvider(embedding_config),
        config,
        embedding_config,
        cache,
    )
    return SuggestionEngine(config, semantic)
