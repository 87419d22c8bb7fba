from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_HF_ROUTER_URL = (
    "https://router.huggingface.co/hf-inference/models/sentence-transformers/all-MiniLM-L6-v2"
)


@dataclass(frozen=True)
class EmbeddingConfig:
    api_url: str = os.getenv("HUGGINGFACE_EMBEDDING_URL", _HF_ROUTER_URL)
    api_key: str = os.getenv("HUGGINGFACE_API_KEY", "")
    request_timeout: float = 8.0
    total_timeout: float = 12.0
    max_workers: int = 4
    max_semantic_candidates: int = 15
    min_embedded_ratio: float = 0.5
    cache_size: int | None = None
    precomputed_path: Path = (
        Path(__file__).resolve().parent.parent / "data" / "processed" / "menu_embeddings.npz"
    )
    enabled: bool = True


DEFAULT_EMBEDDING_CONFIG = EmbeddingConfig()
