"""
models/text_encoder.py
----------------------
Wrapper around a local sentence embedding model.
Default: sentence-transformers/all-MiniLM-L6-v2 (≈90 MB, 384-d, mean pooling).
Swap freely for smaller or quantized variants, as long as the catalog
embeddings are rebuilt with the same model.
"""

import time

import numpy as np

from agent_core.settings import get_settings
from models.runtime import LazyResource, resolve_device


def _build_model():
    from sentence_transformers import SentenceTransformer

    settings = get_settings()
    t0 = time.perf_counter()
    model = SentenceTransformer(settings.embedding_model, device=resolve_device(settings.device))
    print(f"🧠 Loaded text encoder {settings.embedding_model} in {time.perf_counter() - t0:.1f}s")
    return model


text_model = LazyResource(_build_model, name="text-encoder")


def embed_text(text: str) -> np.ndarray:
    """Return a mean-pooled, L2-normalized embedding vector for the given text."""
    model = text_model.get()
    vec = model.encode(text, normalize_embeddings=True, convert_to_numpy=True)
    return np.asarray(vec, dtype=np.float32)


def batch_embed_texts(texts: list[str], batch_size: int = 64) -> np.ndarray:
    """(N, D) float32 matrix of normalized vectors, one row per text."""
    model = text_model.get()
    vecs = model.encode(
        texts,
        batch_size=batch_size,
        normalize_embeddings=True,
        convert_to_numpy=True,
    )
    return np.asarray(vecs, dtype=np.float32)
