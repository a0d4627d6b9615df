"""
recommender/vector_utils.py
---------------------------
Atomic math utilities for comparing query vectors with product embeddings.
Used by the relevance scorer and the offline embedding builder.
"""

from typing import Sequence

import numpy as np


# === CORE MATH ===
def normalize(vec) -> np.ndarray:
    """L2-normalize a vector (safe for zero-length)."""
    vec = np.asarray(vec, dtype=np.float32)
    norm = np.linalg.norm(vec)
    return vec / norm if norm > 0 else vec


def cosine_similarity(a, b) -> float:
    """
    Cosine similarity between two 1-D vectors.

    Returns 0.0 if either vector is missing, the lengths differ, or either
    norm is zero. Never raises for those cases.
    """
    if a is None or b is None:
        return 0.0
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if a.shape != b.shape:
        return 0.0
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def best_similarity(query_vec, vectors: Sequence) -> tuple[float, int, int]:
    """
    Best cosine match of `query_vec` against `vectors`.

    Returns (similarity, index, mismatches). Similarity is floored at 0.0 and
    index is -1 when nothing scores above zero (or `vectors` is empty).
    `mismatches` counts vectors whose dimensionality differs from the query;
    those pairs score 0.0.
    """
    dim = np.asarray(query_vec).shape[-1] if query_vec is not None else None
    best, best_idx, mismatches = 0.0, -1, 0
    for i, vec in enumerate(vectors):
        if dim is not None and len(vec) != dim:
            mismatches += 1
            continue
        sim = cosine_similarity(query_vec, vec)
        if sim > best:
            best, best_idx = sim, i
    return best, best_idx, mismatches
