"""
recommender/recommend.py
------------------------
Two-stage relevance scoring of catalog stores against a user text query.

Stage 1: zero-shot category classification over the catalog's labels.
Stage 2: semantic similarity between the query embedding and each store's
         product embeddings (best match per store).

The category score gates the result; the product similarity boosts it:

    composite = category_score * (1 + similarity_weight * best_similarity)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

import numpy as np

from agent_core.errors import DataIntegrityFault, InferenceFault
from agent_core.logger import log_event
from catalog.loader import CatalogStore, Store
from models.backend import InferenceBackend
from models.runtime import InferenceGate
from recommender.vector_utils import best_similarity


@dataclass(frozen=True)
class ScoredStore:
    store: Store
    score: float
    category_score: float
    best_similarity: float
    best_product: str | None = None


def composite_score(category_score: float, similarity: float, similarity_weight: float = 1.0) -> float:
    return category_score * (1.0 + similarity_weight * similarity)


# ---------------------------------------------------------------------------
# Backend output checks
# ---------------------------------------------------------------------------

def parse_category_scores(result) -> dict[str, float]:
    """Turn a {"labels", "scores"} classifier result into a label -> score map."""
    if not isinstance(result, Mapping):
        # a list here means the pipeline treated the query as a batch
        raise InferenceFault("classify", f"expected a single result mapping, got {type(result).__name__}")
    labels, scores = result.get("labels"), result.get("scores")
    if not isinstance(labels, (list, tuple)) or not isinstance(scores, (list, tuple, np.ndarray)):
        raise InferenceFault("classify", "result is missing 'labels' or 'scores'")
    if len(labels) != len(scores):
        raise InferenceFault("classify", f"{len(labels)} labels but {len(scores)} scores")

    category_scores = {}
    for label, score in zip(labels, scores):
        try:
            value = float(score)
        except (TypeError, ValueError) as e:
            raise InferenceFault("classify", f"non-numeric score for '{label}'") from e
        if not math.isfinite(value):
            raise InferenceFault("classify", f"non-finite score for '{label}'")
        category_scores[str(label)] = value
    return category_scores


def parse_query_vector(vec) -> np.ndarray:
    try:
        arr = np.asarray(vec, dtype=np.float32)
    except (TypeError, ValueError) as e:
        raise InferenceFault("embed", "embedding is not numeric") from e
    if arr.ndim != 1 or arr.size == 0:
        raise InferenceFault("embed", f"expected a 1-D vector, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise InferenceFault("embed", "embedding contains non-finite values")
    return arr


# ---------------------------------------------------------------------------
# Core Scorer
# ---------------------------------------------------------------------------

class RelevanceScorer:
    """
    Scores every store in a catalog for one query. Exactly one classify and
    one embed call per query; any backend failure raises InferenceFault and
    no partial scores are returned.
    """

    def __init__(
        self,
        backend: InferenceBackend,
        gate: InferenceGate | None = None,
        similarity_weight: float = 1.0,
    ):
        self.backend = backend
        self.gate = gate
        self.similarity_weight = similarity_weight

    def _call(self, operation: str, fn, *args):
        if self.gate is not None:
            return self.gate.run(operation, fn, *args)
        try:
            return fn(*args)
        except InferenceFault:
            raise
        except Exception as exc:
            raise InferenceFault(operation, f"{type(exc).__name__}: {exc}") from exc

    def warmup(self):
        try:
            self.backend.warmup()
        except Exception as exc:
            raise InferenceFault("warmup", f"{type(exc).__name__}: {exc}") from exc

    def score(self, query: str, catalog: CatalogStore) -> list[ScoredStore]:
        """
        Composite score for every store, in catalog order. An empty catalog
        makes no inference calls.
        """
        labels = list(catalog.categories)
        if not labels:
            return []
        self.warmup()

        category_scores = parse_category_scores(
            self._call("classify", self.backend.classify, query, labels)
        )
        query_vec = parse_query_vector(self._call("embed", self.backend.embed, query))

        scored, mismatches = [], 0
        for store in catalog.stores:
            category_score = category_scores.get(store.category, 0.0)
            sim, idx, bad = best_similarity(
                query_vec, [p.embedding for p in store.product_embeddings]
            )
            mismatches += bad
            scored.append(ScoredStore(
                store=store,
                score=composite_score(category_score, sim, self.similarity_weight),
                category_score=category_score,
                best_similarity=sim,
                best_product=store.product_embeddings[idx].product if idx >= 0 else None,
            ))

        if mismatches:
            fault = DataIntegrityFault(int(query_vec.shape[0]), catalog.embedding_dim, mismatches)
            log_event("data_integrity", fault.as_payload(), level="warning")
        return scored
