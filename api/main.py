"""
api/main.py
-----------
PeepInMe Store Finder: REST API Layer
-------------------------------------
Loads the catalog at startup (fatal if malformed), optionally warms up the
inference backends, and exposes the query service over HTTP.
"""

from fastapi import FastAPI
from pydantic import BaseModel, Field
from typing import Optional
from contextlib import asynccontextmanager

from agent_core.dispatcher import get_service
from agent_core.logger import log_event
from agent_core.messages import get_messages
from agent_core.response_types import ChatbotResponse
from agent_core.settings import get_settings

# ─────────────────────────────────────────────────────────────────────────────
# 🔁 1. Lifespan Context
# ─────────────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Builds the query service before serving. A bad catalog aborts startup.
    """
    settings = get_settings()
    service = get_service()
    print(f"🚀 PeepInMe initialized with {len(service.catalog)} stores "
          f"in {len(service.catalog.categories)} categories")
    if settings.warmup_on_startup:
        service.scorer.warmup()
        print(f"🔥 Warmed up {settings.classifier_model} + {settings.embedding_model}")
    log_event("startup", {"stores": len(service.catalog), "warmup": settings.warmup_on_startup})
    yield
    service.gate.shutdown()
    print("🧩 PeepInMe shutting down...")

# ─────────────────────────────────────────────────────────────────────────────
# ⚙️ 2. Global App Instance
# ─────────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="PeepInMe Store Finder",
    version="1.0.0",
    description="Finds the stores most relevant to a free-text shopping query.",
    lifespan=lifespan,
)

# ─────────────────────────────────────────────────────────────────────────────
# 📥 3. Request Schema
# ─────────────────────────────────────────────────────────────────────────────

class QueryRequest(BaseModel):
    text: Optional[str] = Field(None, description="User text input")

# ─────────────────────────────────────────────────────────────────────────────
# 🔍 4. Main Endpoint: /query
# ─────────────────────────────────────────────────────────────────────────────

@app.post("/query", response_model=ChatbotResponse, response_model_exclude_none=True)
def query_endpoint(req: QueryRequest):
    """
    Always answers 200; failures and empty results are reported in `kind`.
    Sync handler, so FastAPI runs it in its threadpool while inference blocks.
    """
    return get_service().process_query(req.text)

# ─────────────────────────────────────────────────────────────────────────────
# 🩺 5. Health, Config & Catalog Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@app.get("/health")
def health_check():
    service = get_service()
    return {
        "status": "healthy",
        "stores": len(service.catalog),
        "backend": service.scorer.backend.name,
        "models_loaded": getattr(service.scorer.backend, "loaded", None),
    }

@app.get("/config")
def get_current_config():
    return get_settings().model_dump(mode="json")

@app.get("/catalog/categories")
def list_categories():
    return {"categories": list(get_service().catalog.categories)}

@app.get("/")
def root():
    return {
        "message": get_messages()["welcome"],
        "endpoints": ["/query", "/health", "/config", "/catalog/categories"],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
