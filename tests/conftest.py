import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


@pytest.fixture(autouse=True)
def _model_credentials(monkeypatch):
    """Provide a credential and default settings so no test depends on a local .env."""
    monkeypatch.setenv("GOOGLE_AI_API_KEY", "test-key")
    for key in [
        "BREAKDOWN_MODEL",
        "BREAKDOWN_LLM_BASE_URL",
        "BREAKDOWN_LLM_TEMPERATURE",
        "BREAKDOWN_LLM_TIMEOUT",
        "BREAKDOWN_JSON_EXTRACTION",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _fresh_app_state():
    """Drop settings and model clients cached on the app by earlier tests."""
    from src.breakdown.api.main import app

    for attr in ("settings", "model_client"):
        if hasattr(app.state, attr):
            delattr(app.state, attr)
    yield
    for attr in ("settings", "model_client"):
        if hasattr(app.state, attr):
            delattr(app.state, attr)
