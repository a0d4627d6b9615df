import math

import numpy as np
import pytest

import agent_core.logger as event_log
from agent_core.messages import DEFAULT_MESSAGES
from agent_core.settings import StoreFinderSettings
from catalog.loader import CatalogStore
from models.backend import InferenceBackend


# Unit basis in 3-d: "sunscreen" on x, "pizza" on y.
SUNSCREEN = [1.0, 0.0, 0.0]
PIZZA = [0.0, 1.0, 0.0]
# cos(query, SUNSCREEN) = 0.8, cos(query, PIZZA) = 0.05
SUNSCREEN_QUERY = [0.8, 0.05, math.sqrt(1 - 0.8 ** 2 - 0.05 ** 2)]


def store_record(store_id, category, products=None, name=None):
    """Raw catalog record; `products` maps product label -> embedding."""
    products = products or {}
    return {
        "id": store_id,
        "name": name or f"Store {store_id}",
        "category": category,
        "location": {"province": "San José", "city": "Escazú"},
        "product_embeddings": [{"product": p, "embedding": list(v)} for p, v in products.items()],
        "product_types": list(products),
        "hours": "Mon-Sun 8:00-20:00",
        "contact": f"+506 2000-{store_id:04d}",
    }


class FakeBackend(InferenceBackend):
    """Deterministic classify/embed with call counters."""

    name = "fake"

    def __init__(self, category_scores=None, query_vector=None, fail=None, only_known_labels=False):
        self.category_scores = category_scores or {}
        self.query_vector = SUNSCREEN_QUERY if query_vector is None else query_vector
        self.fail = fail
        self.only_known_labels = only_known_labels
        self.classify_calls = 0
        self.embed_calls = 0
        self.warmups = 0

    def warmup(self):
        self.warmups += 1

    def classify(self, text, labels):
        self.classify_calls += 1
        if self.fail == "classify":
            raise RuntimeError("classifier exploded")
        if self.only_known_labels:
            labels = [l for l in labels if l in self.category_scores]
        return {
            "sequence": text,
            "labels": list(labels),
            "scores": [self.category_scores.get(l, 0.0) for l in labels],
        }

    def embed(self, text):
        self.embed_calls += 1
        if self.fail == "embed":
            raise RuntimeError("encoder exploded")
        return np.asarray(self.query_vector, dtype=np.float32)

    @property
    def calls(self):
        return self.classify_calls + self.embed_calls


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(event_log, "LOG_DIR", log_dir)
    return log_dir


@pytest.fixture
def settings():
    return StoreFinderSettings(inference_timeout=5.0)


@pytest.fixture
def messages():
    return dict(DEFAULT_MESSAGES)


@pytest.fixture
def sunscreen_catalog():
    return CatalogStore.from_records([
        store_record(1, "pharmacy", {"sunscreen": SUNSCREEN}, name="Store A"),
        store_record(2, "restaurant", {"pizza": PIZZA}, name="Store B"),
    ])


@pytest.fixture
def sunscreen_backend():
    return FakeBackend({"pharmacy": 0.9, "restaurant": 0.05}, SUNSCREEN_QUERY)
