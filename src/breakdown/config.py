from __future__ import annotations

"""Environment-driven settings for the breakdown service.

Settings are resolved once at application startup (see ``validate_startup``)
and stored on ``app.state``; nothing here runs at import time.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")
API_KEY_ENV = "GOOGLE_AI_API_KEY"
EXTRACTION_MODES = ("balanced", "greedy")


class MissingCredentialError(RuntimeError):
    """Raised at startup when the model API key is not configured."""

    def __init__(self, env_name: str = API_KEY_ENV) -> None:
        super().__init__(f"(/breakdown):MISSING_{env_name}")
        self.env_name = env_name


def _is_placeholder_key(k: Optional[str]) -> bool:
    if not k:
        return True
    val = k.strip()
    if not val:
        return True
    return val in {"__REDACTED__", "__REPLACE_WITH_YOUR_KEY__", "changeme", "change-me-in-dev", "your_api_key_here", "placeholder"}


def _optional_float(env: Mapping[str, str], name: str) -> Optional[float]:
    raw = (env.get(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    api_key: str = field(default="", repr=False)
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    temperature: Optional[float] = None
    timeout: Optional[float] = None
    extraction: str = "balanced"

    @property
    def has_api_key(self) -> bool:
        return not _is_placeholder_key(self.api_key)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``env`` (defaults to ``os.environ``).

    Raises
    ------
    ValueError
        If a numeric variable does not parse or the extraction mode is unknown.
    """

    env = os.environ if env is None else env
    extraction = (env.get("BREAKDOWN_JSON_EXTRACTION") or "balanced").strip().lower()
    if extraction not in EXTRACTION_MODES:
        raise ValueError(f"BREAKDOWN_JSON_EXTRACTION must be one of {EXTRACTION_MODES}, got {extraction!r}")

    return Settings(
        api_key=(env.get(API_KEY_ENV) or "").strip(),
        model=(env.get("BREAKDOWN_MODEL") or DEFAULT_MODEL).strip(),
        base_url=(env.get("BREAKDOWN_LLM_BASE_URL") or DEFAULT_BASE_URL).strip(),
        temperature=_optional_float(env, "BREAKDOWN_LLM_TEMPERATURE"),
        timeout=_optional_float(env, "BREAKDOWN_LLM_TIMEOUT"),
        extraction=extraction,
    )


def cors_origins(env: Optional[Mapping[str, str]] = None) -> Tuple[str, ...]:
    # Middleware is installed when the app object is built, before startup runs
    env = os.environ if env is None else env
    raw = env.get("BREAKDOWN_CORS_ORIGINS")
    if raw is None:
        return DEFAULT_CORS_ORIGINS
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def validate_startup(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings and refuse to start without a usable API key."""

    settings = load_settings(env)
    if not settings.has_api_key:
        raise MissingCredentialError()
    return settings
