"""
models/backend.py
-----------------
The inference boundary the relevance scorer depends on:

    classify(text, labels) -> {"labels": [...], "scores": [...]}
    embed(text)            -> 1-D normalized vector

Any object with these methods can be swapped in; `warmup()` is called
before timed calls so a cold model load does not count against the
inference timeout.
"""

from typing import Callable, Mapping, Sequence

import numpy as np


class InferenceBackend:
    name = "abstract"

    def warmup(self):
        """Load whatever the backend needs. Idempotent."""

    def classify(self, text: str, labels: Sequence[str]) -> Mapping:
        raise NotImplementedError

    def embed(self, text: str) -> np.ndarray:
        raise NotImplementedError


class LocalModelBackend(InferenceBackend):
    """transformers zero-shot classifier + sentence-transformers encoder, loaded lazily."""

    name = "local-models"

    def warmup(self):
        from models import classifier, text_model
        classifier.get()
        text_model.get()

    def classify(self, text, labels):
        from models import classify_categories
        return classify_categories(text, labels)

    def embed(self, text):
        from models import embed_text
        return embed_text(text)

    @property
    def loaded(self) -> bool:
        from models import classifier, text_model
        return classifier.loaded and text_model.loaded


class CallableBackend(InferenceBackend):
    """Adapts two plain functions to the backend interface."""

    name = "callables"

    def __init__(self, classify: Callable, embed: Callable):
        self._classify = classify
        self._embed = embed

    def classify(self, text, labels):
        return self._classify(text, labels)

    def embed(self, text):
        return self._embed(text)
