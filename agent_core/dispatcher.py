"""
agent_core/dispatcher.py
------------------------
Query service: validates the user's text, runs relevance scoring and result
assembly, and maps every outcome to a ChatbotResponse. Nothing raised below
this layer reaches the caller.
"""

import json
import threading
import time
import traceback

from agent_core.errors import InputError
import agent_core.logger as event_log
from agent_core.logger import log_event
from agent_core.messages import get_messages
from agent_core.response_types import ChatbotResponse, StoreGroup, StoreView
from agent_core.settings import StoreFinderSettings, get_settings
from catalog.loader import CatalogStore, get_catalog
from models.backend import InferenceBackend, LocalModelBackend
from models.runtime import InferenceGate
from recommender.assembler import assemble, group_by_category
from recommender.recommend import RelevanceScorer


# ────────────────────────────────────────────────────────────────
# QUERY SERVICE
# ────────────────────────────────────────────────────────────────
class QueryService:
    def __init__(
        self,
        catalog: CatalogStore,
        backend: InferenceBackend,
        settings: StoreFinderSettings | None = None,
        messages: dict[str, str] | None = None,
    ):
        self.settings = settings or get_settings()
        self.catalog = catalog
        self.messages = messages or get_messages()
        self.gate = InferenceGate(
            timeout=self.settings.inference_timeout,
            serialize=self.settings.serialize_inference,
        )
        self.scorer = RelevanceScorer(
            backend,
            gate=self.gate,
            similarity_weight=self.settings.similarity_weight,
        )

    @staticmethod
    def validate(query) -> str:
        if query is None or not str(query).strip():
            raise InputError("query is empty")
        return str(query).strip()

    def process_query(self, query) -> ChatbotResponse:
        start = time.time()
        try:
            text = self.validate(query)
        except InputError:
            log_perf("query_service", "invalid_input", round(time.time() - start, 4))
            return ChatbotResponse(intro_message=self.messages["empty_query"], kind="invalid_input")

        try:
            scored = self.scorer.score(text, self.catalog)
            result = assemble(
                scored,
                threshold=self.settings.relevance_threshold,
                max_results=self.settings.max_results,
            )
            groups = group_by_category(result.stores)
        except Exception as e:
            log_event("query_failed", {
                "query": text,
                "error": f"{type(e).__name__}: {e}",
                "traceback": traceback.format_exc(limit=5),
            }, level="error")
            log_perf("query_service", "error", round(time.time() - start, 4))
            return ChatbotResponse(intro_message=self.messages["error"], kind="error")

        latency = round(time.time() - start, 4)
        if not groups:
            log_perf("query_service", "no_results", latency)
            return ChatbotResponse(intro_message=self.messages["no_results"], kind="no_results")

        log_event("query_ranked", {
            "query": text,
            "truncated": result.truncated,
            "results": [
                {"id": s.store.id, "score": round(s.score, 4), "product": s.best_product}
                for s in result.stores
            ],
        })
        log_perf("query_service", "results", latency)
        return ChatbotResponse(
            intro_message=self.messages["results"],
            store_groups=[
                StoreGroup(
                    category=category,
                    stores=[StoreView(**s.store.to_public_dict()) for s in items],
                )
                for category, items in groups
            ],
            kind="results",
        )


# ────────────────────────────────────────────────────────────────
# DEFAULT SERVICE (process-wide)
# ────────────────────────────────────────────────────────────────
_service: QueryService | None = None
_service_lock = threading.Lock()


def get_service() -> QueryService:
    """
    Build the default service on first use: configured catalog plus local
    models. Catalog errors propagate (fatal at startup).
    """
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = QueryService(get_catalog(), LocalModelBackend())
    return _service


def set_service(service: QueryService | None):
    global _service
    with _service_lock:
        _service = service


def process_query(query) -> ChatbotResponse:
    return get_service().process_query(query)


def handle_query(text=None):
    """
    High-level interface for API and CLI.
    Returns the response payload (camelCase keys, `storeGroups` omitted when empty).
    """
    log_event("query_received", {"text": text})
    response = process_query(text).to_payload()
    log_event("response_generated", {"kind": response["kind"]})
    return response


# ────────────────────────────────────────────────────────────────
# PERFORMANCE LOGGER
# ────────────────────────────────────────────────────────────────
def log_perf(component: str, outcome: str, latency: float):
    """
    Lightweight micro-benchmark logger.
    Appends latency entries to logs/dispatcher_perf.json
    """
    log_path = event_log.log_dir() / "dispatcher_perf.json"
    entry = {"component": component, "outcome": outcome, "latency": latency, "ts": time.time()}

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as e:
        print(f"[dispatcher] Logging failed: {e}")
