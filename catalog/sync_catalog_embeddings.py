"""
catalog/sync_catalog_embeddings.py
----------------------------------
Offline job: rebuilds stores_with_embeddings.json whenever stores.json
changes. Every product type of every store is embedded with the same
encoder the query path uses, so query and catalog vectors share one space.
"""

from __future__ import annotations
import argparse
import hashlib
import json
from pathlib import Path

import numpy as np

from catalog.loader import load_catalog
from models.text_encoder import batch_embed_texts

STORES_INPUT = Path(__file__).parent / "stores.json"
STORES_OUTPUT = Path(__file__).parent / "stores_with_embeddings.json"


def checksum(path: Path) -> str:
    """Compute SHA256 checksum of a file."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def attach_embeddings(stores: list[dict], embed_batch=None) -> list[dict]:
    """Return copies of `stores` with a `product_embeddings` list added to each."""
    embed_batch = embed_batch or batch_embed_texts
    texts = [p for store in stores for p in store.get("product_types", [])]
    vectors = embed_batch(texts) if texts else np.zeros((0, 0), dtype=np.float32)

    out, i = [], 0
    for store in stores:
        products = store.get("product_types", [])
        out.append({
            **store,
            "product_embeddings": [
                {"product": p, "embedding": [float(x) for x in vectors[i + j]]}
                for j, p in enumerate(products)
            ],
        })
        i += len(products)
    return out


def verify_catalog(path: Path):
    catalog = load_catalog(path)
    vecs = [p.embedding for s in catalog for p in s.product_embeddings]
    print(f"✅ Verified {len(catalog)} stores, {len(vecs)} product vectors, dim={catalog.embedding_dim}")
    print(f"Checksum: {checksum(path)[:16]}...")
    if vecs:
        mean_norm = float(np.linalg.norm(np.stack(vecs), axis=1).mean())
        print(f"Mean norm ≈ {mean_norm:.4f} (should be ~1.0)")
        if not np.isclose(mean_norm, 1.0, atol=1e-2):
            raise ValueError("Embeddings not normalized")


def rebuild_embeddings(input_path: Path = STORES_INPUT, output_path: Path = STORES_OUTPUT, verify: bool = False):
    with open(input_path, "r", encoding="utf-8") as f:
        stores = json.load(f)
    print(f"🧠 Embedding product types for {len(stores)} stores...")

    enriched = attach_embeddings(stores)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(enriched, f, indent=2, ensure_ascii=False)
    print(f"✅ Saved {output_path}")

    if verify:
        verify_catalog(output_path)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Add product embeddings to the store catalog")
    parser.add_argument("--input", type=Path, default=STORES_INPUT)
    parser.add_argument("--output", type=Path, default=STORES_OUTPUT)
    parser.add_argument("--verify", action="store_true", help="Run post-build verification")
    args = parser.parse_args()
    rebuild_embeddings(args.input, args.output, verify=args.verify)
