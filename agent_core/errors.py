"""
agent_core/errors.py
--------------------
Exception taxonomy for the store finder.

Only ``InferenceFault`` escapes the scoring layer at query time; the query
service turns it into a user-facing fallback message. ``CatalogError`` is
raised while loading the catalog and is fatal at startup.
"""


class StoreFinderError(Exception):
    """Base class for all store finder errors."""


class InputError(StoreFinderError):
    """Empty or whitespace-only query."""


class InferenceFault(StoreFinderError):
    """Classification or embedding call failed, timed out, or returned a malformed shape."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class DataIntegrityFault(StoreFinderError):
    """
    Query vector and product embeddings disagree on dimensionality. Not raised
    on the query path: the pairs score 0 and the fault is logged as a warning.
    """

    def __init__(self, query_dim: int, catalog_dim: int, mismatched_pairs: int):
        self.query_dim = query_dim
        self.catalog_dim = catalog_dim
        self.mismatched_pairs = mismatched_pairs
        super().__init__(
            f"query vector has {query_dim} dims, catalog has {catalog_dim}; "
            f"{mismatched_pairs} product pairs scored 0"
        )

    def as_payload(self) -> dict:
        return {
            "query_dim": self.query_dim,
            "catalog_dim": self.catalog_dim,
            "mismatched_pairs": self.mismatched_pairs,
            "detail": str(self),
        }


class CatalogError(StoreFinderError):
    """The precomputed catalog is malformed."""
