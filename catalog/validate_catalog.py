"""
catalog/validate_catalog.py
---------------------------
Ensures stores_with_embeddings.json is well-formed and schema-consistent.
"""

import argparse
import json
import numbers
from pathlib import Path

from agent_core.errors import CatalogError

CATALOG_PATH = Path(__file__).parent / "stores_with_embeddings.json"

REQUIRED_FIELDS = [
    "id", "name", "category", "location",
    "product_embeddings", "product_types", "hours", "contact",
]


def _check_embedding(entry, idx: int, item_id) -> int:
    if not isinstance(entry, dict) or "product" not in entry or "embedding" not in entry:
        raise CatalogError(f"product_embeddings[{idx}] of store {item_id} needs 'product' and 'embedding'")
    vec = entry["embedding"]
    if not isinstance(vec, list) or not vec:
        raise CatalogError(f"embedding for '{entry['product']}' in store {item_id} must be a non-empty list")
    if not all(isinstance(x, numbers.Real) and not isinstance(x, bool) for x in vec):
        raise CatalogError(f"embedding for '{entry['product']}' in store {item_id} has non-numeric values")
    return len(vec)


def validate_catalog(data) -> int:
    """
    Validate parsed catalog data. Returns the shared embedding dimension
    (0 if no store has product embeddings). Raises CatalogError.
    """
    if not isinstance(data, list):
        raise CatalogError("catalog must be a JSON list of store records")

    seen_ids = set()
    dim = None
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise CatalogError(f"item {idx} is not an object")
        for field in REQUIRED_FIELDS:
            if field not in item:
                raise CatalogError(f"Missing field '{field}' in item {idx}")
        item_id = item["id"]
        if not isinstance(item_id, int) or isinstance(item_id, bool):
            raise CatalogError(f"id must be an integer in item {idx}")
        if item_id in seen_ids:
            raise CatalogError(f"duplicate store id {item_id}")
        seen_ids.add(item_id)

        location = item["location"]
        if not isinstance(location, dict) or "province" not in location or "city" not in location:
            raise CatalogError(f"location must have 'province' and 'city' in store {item_id}")
        if not isinstance(item["product_types"], list):
            raise CatalogError(f"product_types field must be a list in store {item_id}")
        if not isinstance(item["product_embeddings"], list):
            raise CatalogError(f"product_embeddings field must be a list in store {item_id}")

        for j, entry in enumerate(item["product_embeddings"]):
            n = _check_embedding(entry, j, item_id)
            if dim is None:
                dim = n
            elif n != dim:
                raise CatalogError(
                    f"embedding dimension mismatch in store {item_id}: expected {dim}, got {n}"
                )
    return dim or 0


def validate_catalog_file(path: Path = CATALOG_PATH) -> int:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"{path} is not valid JSON: {e}") from e
    dim = validate_catalog(data)
    print(f"✅ Catalog validated successfully: {len(data)} stores, dim={dim}")
    return dim


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Validate a store catalog with embeddings")
    parser.add_argument("path", nargs="?", type=Path, default=CATALOG_PATH)
    args = parser.parse_args()
    validate_catalog_file(args.path)
