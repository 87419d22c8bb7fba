from __future__ import annotations

import logging
import math
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from ..catalog.models import CatalogItem, Category
from ..embeddings.cache import EmbeddingCache
from ..embeddings.config import DEFAULT_EMBEDDING_CONFIG, EmbeddingConfig
from ..embeddings.provider import EmbeddingProvider, EmbeddingUnavailable
from .config import DEFAULT_SUGGESTION_CONFIG, SuggestionConfig
from .context import SuggestionContext

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05  # seconds between cancellation checks


def _raise_if_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise EmbeddingUnavailable("Suggestion call cancelled")


class SemanticStrategy:
    """Scores candidates by embedding similarity to the context.

    The score is cosine similarity plus the same variety, drink and
    unvisited signals the rule-based strategy uses, scaled down to the
    similarity range.
    """

    is_semantic = True

    def __init__(
        self,
        provider: EmbeddingProvider,
        config: SuggestionConfig = DEFAULT_SUGGESTION_CONFIG,
        embedding_config: EmbeddingConfig = DEFAULT_EMBEDDING_CONFIG,
        cache: EmbeddingCache | None = None,
    ) -> None:
        self.provider = provider
        self.config = config
        self.embedding_config = embedding_config
        self.cache = cache if cache is not None else EmbeddingCache(embedding_config.cache_size)

    def _fetch(self, text: str) -> np.ndarray:
        try:
            return self.provider.embed(text)
        except EmbeddingUnavailable:
            raise
        except Exception as exc:
            raise EmbeddingUnavailable(f"Embedding provider error: {exc}") from exc

    def embed(self, text: str) -> np.ndarray:
        vector = self.cache.get(text)
        if vector is None:
            vector = self._fetch(text)
            self.cache.set(text, vector)
        return vector

    def score_candidate(self, context: SuggestionContext, item: CatalogItem) -> float:
        return self._blend(context, item, self.embed(context.text), self.embed(item.text))

    def score_candidates(
        self,
        context: SuggestionContext,
        candidates: list[CatalogItem],
        cancel: threading.Event | None = None,
    ) -> list[tuple[CatalogItem, float]]:
        """Score up to ``max_semantic_candidates`` candidates.

        One ``total_timeout`` deadline covers the context lookup and every
        candidate lookup. Raises EmbeddingUnavailable when the context
        embedding fails (before any candidate lookup starts), when too few
        candidate embeddings come back, or when ``cancel`` is set.
        """
        if not context.text:
            raise EmbeddingUnavailable("Context has no text to embed")
        deadline = time.monotonic() + self.embedding_config.total_timeout

        context_vec = self._embed_many([context.text], deadline, cancel).get(context.text)
        if context_vec is None:
            raise EmbeddingUnavailable("No embedding for the context")

        pool = candidates[: self.embedding_config.max_semantic_candidates]
        vectors = {
            text: vec
            for text, vec in self._embed_many([item.text for item in pool], deadline, cancel).items()
            if vec.shape == context_vec.shape
        }
        required = max(1, math.ceil(self.embedding_config.min_embedded_ratio * len(pool)))
        if len(vectors) < required:
            raise EmbeddingUnavailable(
                f"Only {len(vectors)} of {len(pool)} candidate embeddings succeeded"
            )

        scored = [
            (item, self._blend(context, item, context_vec, vectors[item.text]))
            for item in pool
            if item.text in vectors
        ]
        _raise_if_cancelled(cancel)
        return scored

    def _blend(
        self,
        context: SuggestionContext,
        item: CatalogItem,
        context_vec: np.ndarray,
        item_vec: np.ndarray,
    ) -> float:
        if context_vec.shape != item_vec.shape:
            raise EmbeddingUnavailable("Embedding dimensions do not match")
        cfg = self.config
        score = float(cosine_similarity(context_vec.reshape(1, -1), item_vec.reshape(1, -1))[0, 0])

        if context.mode == "cart":
            if item.category not in context.categories:
                score += cfg.semantic_variety_bonus
            if item.category == Category.beverages and "drink" not in context.signals:
                score += cfg.semantic_drink_bonus
        else:
            if not context.has_ordered(item):
                score += cfg.semantic_unvisited_bonus
            score += item.rating * cfg.semantic_rating_weight
        return score

    def _embed_many(
        self,
        texts: list[str],
        deadline: float,
        cancel: threading.Event | None,
    ) -> dict[str, np.ndarray]:
        _raise_if_cancelled(cancel)
        vectors: dict[str, np.ndarray] = {}
        missing: list[str] = []
        for text in dict.fromkeys(texts):
            cached = self.cache.get(text)
            if cached is not None:
                vectors[text] = cached
            else:
                missing.append(text)
        if not missing:
            return vectors

        cfg = self.embedding_config
        executor = ThreadPoolExecutor(max_workers=cfg.max_workers, thread_name_prefix="embedding")
        futures = {executor.submit(self._fetch, text): text for text in missing}
        pending = set(futures)
        try:
            while pending:
                _raise_if_cancelled(cancel)
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(
                        "%d embedding lookups missed the %.1fs deadline",
                        len(pending),
                        cfg.total_timeout,
                    )
                    break
                done, pending = wait(
                    pending, timeout=min(remaining, _POLL_INTERVAL), return_when=FIRST_COMPLETED
                )
                for future in done:
                    text = futures[future]
                    try:
                        vector = future.result()
                    except EmbeddingUnavailable:
                        logger.debug("No embedding for %r", text, exc_info=True)
                        continue
                    self.cache.set(text, vector)
                    vectors[text] = vector
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return vectors
