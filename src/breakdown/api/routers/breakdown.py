from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...domain.breakdown_models import BreakdownResponse, ErrorResponse
from ...observability.metrics import record_outcome
from ...services.breakdown_ai import InvalidInputError, generate_breakdown, parse_request
from ...services.response_parser import ParseFailed
from ..dependencies import get_model_client, get_settings

router = APIRouter(tags=["breakdown"])

logger = logging.getLogger("breakdown.api")

_RESPONSES: Dict[int, Dict[str, Any]] = {
    200: {"model": BreakdownResponse},
    400: {"model": ErrorResponse, "description": "Missing or invalid idea"},
    422: {"model": ErrorResponse, "description": "Model reply could not be parsed"},
    500: {"model": ErrorResponse, "description": "Upstream or unexpected failure"},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("/breakdown", responses=_RESPONSES)
async def create_breakdown(request: Request) -> JSONResponse:
    """Break a project idea down into priorities, architecture and phases.

    Body: ``{"idea": str, "depth"?: int, "focusArea"?: str | null}``.
    """
    try:
        body = await request.json()
        try:
            req = parse_request(body)
        except InvalidInputError as exc:
            logger.info("(/breakdown):invalid input: %s", exc)
            record_outcome("invalid_input")
            return _error(400, "invalid input")

        settings = get_settings(request)
        client = get_model_client(request)
        outcome = await generate_breakdown(req, client, extraction=settings.extraction)
    except Exception:
        logger.exception("(/breakdown):ERROR")
        record_outcome("error")
        return _error(500, "internal server error")

    if isinstance(outcome.result, ParseFailed):
        logger.error("(/breakdown):parse error: %s", outcome.result.reason)
        logger.error("(/breakdown):raw response: %s", outcome.raw_text)
        record_outcome("parse_failed")
        return _error(422, "failed to parse model response")

    try:
        response = JSONResponse(outcome.result.data)
    except Exception:
        logger.exception("(/breakdown):ERROR rendering model response")
        record_outcome("error")
        return _error(500, "internal server error")
    record_outcome("ok")
    return response
