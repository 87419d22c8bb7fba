"""
Embeddings layer for semantic suggestions.

Responsibilities:
- Call a remote sentence-transformer inference endpoint for text embeddings.
- Memoize embeddings by exact input text for the engine's lifetime.
- Precompute menu embeddings offline to warm the cache.
"""
