"""Turn a model's free-text reply into a normalized breakdown object.

Models tend to wrap the requested JSON in prose ("Sure! Here is ...") or
emit stray braces. Extraction therefore looks for a JSON *object* span in
the text instead of decoding the whole reply, and reports the outcome as a
``ParsedOk`` / ``ParseFailed`` value rather than raising.

Two extraction strategies are available:

``balanced``
    Try each ``{`` in order, find its balancing ``}`` (ignoring braces inside
    string literals) and keep the first span that decodes to an object.
``greedy``
    Take everything from the first ``{`` to the last ``}`` and decode it.
"""

from __future__ import annotations

import copy
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple, Union

REQUIRED_KEYS: Tuple[str, ...] = ("overview", "priorities", "systemArchitecture", "developmentSteps")
PRIORITY_LEVELS: Tuple[str, ...] = ("p0", "p1", "p2")

DEFAULT_PRIORITY: Dict[str, Any] = {
    "frontend": {"components": []},
    "backend": {"services": [], "dataModel": []},
}

_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ParsedOk:
    data: Dict[str, Any]


@dataclass(frozen=True)
class ParseFailed:
    reason: str


ParseResult = Union[ParsedOk, ParseFailed]


def _balanced_spans(text: str) -> Iterator[str]:
    """Yield each brace-balanced ``{...}`` span, in order of its opening brace."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end: Optional[int] = None
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break
        if end is not None:
            yield text[start : end + 1]
        start = text.find("{", start + 1)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def _decode(span: str) -> Any:
    return json.loads(span, parse_constant=_reject_constant)


def _extract_balanced(text: str) -> ParseResult:
    first_error: Optional[str] = None
    for span in _balanced_spans(text):
        try:
            value = _decode(span)
        except ValueError as exc:
            first_error = first_error or f"invalid JSON: {exc}"
            continue
        if isinstance(value, dict):
            return ParsedOk(value)
    return ParseFailed(first_error or "malformed model output")


def _extract_greedy(text: str) -> ParseResult:
    m = _GREEDY_OBJECT.search(text)
    if not m:
        return ParseFailed("malformed model output")
    try:
        value = _decode(m.group(0))
    except ValueError as exc:
        return ParseFailed(f"invalid JSON: {exc}")
    if not isinstance(value, dict):
        return ParseFailed("malformed model output")
    return ParsedOk(value)


def extract_json_object(text: str, mode: str = "balanced") -> ParseResult:
    if not text or not isinstance(text, str):
        return ParseFailed("malformed model output")
    if mode == "greedy":
        return _extract_greedy(text)
    return _extract_balanced(text)


def _is_missing(value: Any) -> bool:
    # Same values a JavaScript falsy check rejects
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and value == 0


def default_priority() -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_PRIORITY)


def normalize_breakdown(data: Dict[str, Any]) -> ParseResult:
    """Check the required keys and backfill missing priority tiers.

    The returned object is a new dict merged over the default template;
    ``data`` itself is left untouched.
    """
    for key in REQUIRED_KEYS:
        if _is_missing(data.get(key)):
            return ParseFailed(f"invalid response structure: missing {key}")
    priorities = data["priorities"]
    if not isinstance(priorities, dict):
        return ParseFailed("invalid response structure: priorities is not an object")

    merged_priorities: Dict[str, Any] = {level: default_priority() for level in PRIORITY_LEVELS}
    merged_priorities.update({k: v for k, v in priorities.items() if not _is_missing(v)})

    out = dict(data)
    out["priorities"] = merged_priorities
    return ParsedOk(out)


def parse_breakdown(text: str, mode: str = "balanced") -> ParseResult:
    result = extract_json_object(text, mode)
    if isinstance(result, ParseFailed):
        return result
    return normalize_breakdown(result.data)
