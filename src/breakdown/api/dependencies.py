from __future__ import annotations

from fastapi import Request

from ..config import Settings, load_settings
from ..services.llm_client import ModelClient, build_model_client


def get_settings(request: Request) -> Settings:
    """Settings resolved at startup, or read from the environment if startup was skipped."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        settings = load_settings()
        request.app.state.settings = settings
    return settings


def get_model_client(request: Request) -> ModelClient:
    # One client per app; it keeps no per-request state
    client = getattr(request.app.state, "model_client", None)
    if client is None:
        client = build_model_client(get_settings(request))
        request.app.state.model_client = client
    return client
