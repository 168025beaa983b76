from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from dotenv import load_dotenv
import logging
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from ..config import cors_origins, validate_startup
from .routers.breakdown import router as breakdown_router
from .routers.diag import router as diag_router
from ..observability.metrics import metrics_middleware_factory

load_dotenv()  # Load environment variables from .env if present (GOOGLE_AI_API_KEY, BREAKDOWN_MODEL, etc.)

APP_NAME = "Project Breakdown API"
APP_VERSION = "0.1.0"

logger = logging.getLogger("breakdown.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Refuse to serve without a credential
    settings = validate_startup()
    app.state.settings = settings
    logger.info("breakdown api ready model=%s extraction=%s", settings.model, settings.extraction)
    yield


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

# Observability: request latency histogram
app.middleware("http")(metrics_middleware_factory())

# Routers
app.include_router(breakdown_router)
app.include_router(diag_router)

# Also expose the same routers under /api for web clients that call /api/breakdown
app.include_router(breakdown_router, prefix="/api")
app.include_router(diag_router, prefix="/api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(cors_origins()),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _health_payload() -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        "components": {
            "api": "ok",
            "model": "configured" if getattr(app.state, "settings", None) else "unchecked",
        },
    }


@app.get("/")
def root():
    return {"name": APP_NAME, "version": APP_VERSION}


@app.get("/health")
def health():
    return _health_payload()


@app.get("/metrics")
def metrics() -> Response:
    # Expose Prometheus metrics
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.get("/api/health")
def api_health():
    return _health_payload()
