"""
Offline script to precompute menu item embeddings.

Usage:
    python -m bitesbuzz.embeddings.precompute
"""
from __future__ import annotations

import logging

from ..catalog.data_store import load_catalog
from .cache import EmbeddingCache
from .config import DEFAULT_EMBEDDING_CONFIG, EmbeddingConfig
from .provider import EmbeddingProvider, EmbeddingUnavailable, HuggingFaceInferenceProvider

logger = logging.getLogger(__name__)


def run_precompute(
    config: EmbeddingConfig = DEFAULT_EMBEDDING_CONFIG,
    provider: EmbeddingProvider | None = None,
) -> int:
    """Embed every menu item text and save the result. Returns items embedded."""
    provider = provider or HuggingFaceInferenceProvider(config)
    cache = EmbeddingCache()
    texts = [item.text for item in load_catalog()]

    print(f"Encoding {len(texts)} menu items ...")
    for text in texts:
        try:
            cache.set(text, provider.embed(text))
        except EmbeddingUnavailable:
            logger.warning("Skipping %r, no embedding", text, exc_info=True)

    cache.save(config.precomputed_path)
    print(f"Saved {len(cache)} embeddings to {config.precomputed_path}")
    return len(cache)


if __name__ == "__main__":
    run_precompute()
