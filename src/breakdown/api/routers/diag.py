from __future__ import annotations

from fastapi import APIRouter, Request

from ..dependencies import get_settings

router = APIRouter(prefix="/diag", tags=["diagnostics"])


@router.get("/llm")
def diag_llm(request: Request):
    settings = get_settings(request)
    return {
        "provider": "gemini",
        "model": settings.model,
        "base_url": settings.base_url,
        "has_api_key": settings.has_api_key,
        "extraction": settings.extraction,
        "ready": settings.has_api_key,
    }
