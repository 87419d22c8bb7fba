from __future__ import annotations

import logging
from typing import Any, Protocol

import numpy as np
import requests

from .config import DEFAULT_EMBEDDING_CONFIG, EmbeddingConfig

logger = logging.getLogger(__name__)


class EmbeddingUnavailable(Exception):
    """No usable embedding could be obtained for a piece of text."""


class EmbeddingProvider(Protocol):
    def embed(self, text: str) -> np.ndarray: ...


def parse_embedding(payload: Any) -> np.ndarray:
    """Extract a 1-D float vector from an inference response body.

    Accepts ``[0.1, 0.2, ...]`` or ``[[0.1, 0.2, ...]]``.
    """
    if not isinstance(payload, list) or not payload:
        raise EmbeddingUnavailable("Embedding payload is not a non-empty array")
    if isinstance(payload[0], list):
        payload = payload[0]
    if not payload or not all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in payload
    ):
        raise EmbeddingUnavailable("Embedding payload is not an array of numbers")
    vector = np.asarray(payload, dtype=float)
    if not np.all(np.isfinite(vector)):
        raise EmbeddingUnavailable("Embedding payload contains non-finite values")
    return vector


class HuggingFaceInferenceProvider:
    """Sentence embeddings from a Hugging Face inference endpoint."""

    def __init__(
        self,
        config: EmbeddingConfig = DEFAULT_EMBEDDING_CONFIG,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self._http = session or requests

    def embed(self, text: str) -> np.ndarray:
        try:
            response = self._http.post(
                self.config.api_url,
                headers={
                    "Authorization": f"Bearer {self.config.api_key}",
                    "Content-Type": "application/json",
                },
                json={"inputs": text},
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as exc:
            raise EmbeddingUnavailable(f"Embedding request failed: {exc}") from exc

        if response.status_code != 200:
            raise EmbeddingUnavailable(f"Embedding API returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise EmbeddingUnavailable("Embedding API returned invalid JSON") from exc

        vector = parse_embedding(payload)
        logger.debug("Got embedding with %d dimensions", vector.shape[0])
        return vector
