"""
agent_core/settings.py
----------------------
Runtime configuration, overridable through ``PEEPINME_*`` environment
variables (e.g. ``PEEPINME_RELEVANCE_THRESHOLD=0.4``).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parents[1]


class StoreFinderSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PEEPINME_")

    # ── data ────────────────────────────────────────────────────────────
    catalog_path: Path = ROOT_DIR / "catalog" / "stores_with_embeddings.json"
    messages_path: Path = ROOT_DIR / "config" / "messages.yaml"
    log_dir: Path = ROOT_DIR / "logs"

    # ── inference backends ──────────────────────────────────────────────
    classifier_model: str = "facebook/bart-large-mnli"
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    device: str = "auto"                          # auto | cpu | cuda
    inference_timeout: float = Field(60.0, gt=0)  # seconds, per call
    serialize_inference: bool = True
    warmup_on_startup: bool = False

    # ── ranking policy (empirically tuned) ─────────────────────────────
    relevance_threshold: float = 0.5
    max_results: int = Field(5, ge=1)
    similarity_weight: float = 1.0


@lru_cache(maxsize=1)
def get_settings() -> StoreFinderSettings:
    return StoreFinderSettings()
