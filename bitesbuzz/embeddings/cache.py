from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from pathlib import Path

import numpy as np

logger = logging.getLogger(__name__)


class EmbeddingCache:
    """Embeddings memoized by exact input text.

    Entries never expire. With ``max_size`` set the cache evicts the least
    recently used text once full; otherwise it grows for the owner's lifetime.
    Writes are last-writer-wins, which is safe because an embedding is a pure
    function of its text.
    """

    def __init__(self, max_size: int | None = None) -> None:
        self.max_size = max_size
        self._entries: OrderedDict[str, np.ndarray] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, text: str) -> np.ndarray | None:
        with self._lock:
            vector = self._entries.get(text)
            if vector is None:
                self._misses += 1
                return None
            self._hits += 1
            if self.max_size is not None:
                self._entries.move_to_end(text)
            return vector

    def set(self, text: str, vector: np.ndarray) -> None:
        with self._lock:
            self._entries[text] = vector
            if self.max_size is not None:
                self._entries.move_to_end(text)
                while len(self._entries) > self.max_size:
                    self._entries.popitem(last=False)

    def __contains__(self, text: str) -> bool:
        with self._lock:
            return text in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
            }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def save(self, path: Path) -> None:
        """Persist entries as an ``.npz`` with parallel ``texts``/``vectors`` arrays."""
        with self._lock:
            texts = list(self._entries)
            vectors = [self._entries[t] for t in texts]
        path.parent.mkdir(parents=True, exist_ok=True)
        np.savez(path, texts=np.array(texts, dtype=str), vectors=np.array(vectors, dtype=float))

    def load(self, path: Path) -> int:
        """Warm the cache from a file written by :meth:`save`. Returns entries loaded."""
        with np.load(path, allow_pickle=False) as data:
            texts = [str(t) for t in data["texts"]]
            vectors = data["vectors"]
        for text, vector in zip(texts, vectors):
            self.set(text, np.asarray(vector, dtype=float))
        logger.info("Warmed embedding cache with %d entries from %s", len(texts), path)
        return len(texts)
