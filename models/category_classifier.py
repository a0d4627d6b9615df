"""
models/category_classifier.py
-----------------------------
Zero-shot category classifier (transformers NLI pipeline).
Default: facebook/bart-large-mnli in multi-label mode, so every candidate
label gets an independent relevance score in [0, 1].
"""

import time
from typing import Sequence

from agent_core.settings import get_settings
from models.runtime import LazyResource, resolve_device


def _build_pipeline():
    from transformers import pipeline

    settings = get_settings()
    t0 = time.perf_counter()
    pipe = pipeline(
        "zero-shot-classification",
        model=settings.classifier_model,
        device=resolve_device(settings.device),
    )
    print(f"🧠 Loaded classifier {settings.classifier_model} in {time.perf_counter() - t0:.1f}s")
    return pipe


classifier = LazyResource(_build_pipeline, name="category-classifier")


def classify_categories(text: str, labels: Sequence[str]) -> dict:
    """
    Score `text` against each candidate label.
    Returns the pipeline output: {"sequence", "labels": [...], "scores": [...]}.
    """
    pipe = classifier.get()
    return pipe(text, candidate_labels=list(labels), multi_label=True)
