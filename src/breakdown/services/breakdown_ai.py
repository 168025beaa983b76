from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..domain.breakdown_models import BreakdownRequest
from .llm_client import ModelClient
from .prompt import build_breakdown_prompt
from .response_parser import ParseResult, parse_breakdown

LOG = logging.getLogger("breakdown.llm")


class InvalidInputError(ValueError):
    """The request body does not describe a usable idea."""


@dataclass(frozen=True)
class BreakdownOutcome:
    result: ParseResult
    raw_text: str


def parse_request(body: Any) -> BreakdownRequest:
    if not isinstance(body, dict):
        raise InvalidInputError("request body must be a JSON object")
    try:
        return BreakdownRequest.model_validate(body)
    except ValidationError as exc:
        raise InvalidInputError(str(exc)) from exc


async def generate_breakdown(req: BreakdownRequest, client: ModelClient, extraction: str = "balanced") -> BreakdownOutcome:
    """Prompt the model once and parse its reply.

    Upstream errors propagate to the caller; only the parsing outcome is
    returned as a value.
    """
    prompt = build_breakdown_prompt(req.idea, depth=req.depth, focus_area=req.focus_area)
    text = await client.generate(prompt)
    result = parse_breakdown(text, mode=extraction)
    LOG.debug("breakdown_parsed model=%s outcome=%s", client.model, type(result).__name__)
    return BreakdownOutcome(result=result, raw_text=text)
