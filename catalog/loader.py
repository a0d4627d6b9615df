"""
catalog/loader.py
-----------------
Loads the precomputed store catalog (JSON with product embeddings) into
immutable records and exposes the process-wide catalog instance.
"""

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np

from agent_core.errors import CatalogError
from catalog.validate_catalog import validate_catalog

CATALOG_PATH = Path(__file__).parent / "stores_with_embeddings.json"


@dataclass(frozen=True)
class Location:
    province: str
    city: str


@dataclass(frozen=True, eq=False)
class ProductEmbedding:
    product: str
    embedding: np.ndarray


@dataclass(frozen=True, eq=False)
class Store:
    id: int
    name: str
    category: str
    location: Location
    product_embeddings: tuple[ProductEmbedding, ...]
    product_types: tuple[str, ...]
    hours: str
    contact: str

    def to_public_dict(self) -> dict:
        """Display fields only; embeddings stay server-side."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "location": {"province": self.location.province, "city": self.location.city},
            "product_types": list(self.product_types),
            "hours": self.hours,
            "contact": self.contact,
        }


def _frozen_vector(values) -> np.ndarray:
    vec = np.asarray(values, dtype=np.float32)
    vec.flags.writeable = False
    return vec


def _build_store(item: dict) -> Store:
    return Store(
        id=item["id"],
        name=str(item["name"]),
        category=str(item["category"]),
        location=Location(
            province=str(item["location"]["province"]),
            city=str(item["location"]["city"]),
        ),
        product_embeddings=tuple(
            ProductEmbedding(product=str(p["product"]), embedding=_frozen_vector(p["embedding"]))
            for p in item["product_embeddings"]
        ),
        product_types=tuple(str(t) for t in item["product_types"]),
        hours=str(item["hours"]),
        contact=str(item["contact"]),
    )


class CatalogStore:
    """Read-only, in-memory view of the catalog."""

    def __init__(self, stores, embedding_dim: int = 0):
        self._stores = tuple(stores)
        self._by_id = {s.id: s for s in self._stores}
        self._categories = tuple(dict.fromkeys(s.category for s in self._stores))
        self.embedding_dim = embedding_dim

    @classmethod
    def from_records(cls, data) -> "CatalogStore":
        dim = validate_catalog(data)
        return cls((_build_store(item) for item in data), embedding_dim=dim)

    @property
    def stores(self) -> tuple[Store, ...]:
        return self._stores

    @property
    def categories(self) -> tuple[str, ...]:
        """Distinct category labels (first-seen order)."""
        return self._categories

    def get_store(self, store_id: int) -> Store | None:
        return self._by_id.get(store_id)

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self) -> Iterator[Store]:
        return iter(self._stores)


def load_catalog(path: Path = CATALOG_PATH) -> CatalogStore:
    """Parse and validate a catalog file. Raises CatalogError if malformed."""
    path = Path(path)
    if not path.exists():
        raise CatalogError(
            f"{path} not found; build it with `python -m catalog.sync_catalog_embeddings`"
        )
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"{path} is not valid JSON: {e}") from e
    return CatalogStore.from_records(data)


# === PROCESS-WIDE INSTANCE ===
_catalog: CatalogStore | None = None
_catalog_lock = threading.Lock()


def get_catalog() -> CatalogStore:
    """Load the configured catalog once; every later call returns the same instance."""
    global _catalog
    if _catalog is None:
        with _catalog_lock:
            if _catalog is None:
                from agent_core.settings import get_settings
                _catalog = load_catalog(get_settings().catalog_path)
    return _catalog


def set_catalog(catalog: CatalogStore | None):
    """Install (or clear) the process-wide catalog. Used at startup and in tests."""
    global _catalog
    with _catalog_lock:
        _catalog = catalog
