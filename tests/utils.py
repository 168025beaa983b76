from __future__ import annotations

import json
from typing import Any, Dict, List, Optional


class StubModelClient:
    """Model client double that records prompts and replays a canned reply."""

    model = "stub-model"

    def __init__(self, reply: str = "", error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def tier(component: str = "Login form", service: str = "Auth service") -> Dict[str, Any]:
    return {
        "frontend": {
            "components": [
                {"name": component, "description": "Lets users sign in", "requirements": ["email", "password"]}
            ]
        },
        "backend": {
            "services": [
                {"name": service, "description": "Issues sessions", "requirements": ["hash passwords"]}
            ],
            "dataModel": ["User has many Sessions"],
        },
    }


def breakdown_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "overview": "A simple todo app for individuals",
        "priorities": {"p0": tier(), "p1": tier("Tag filter", "Tag service"), "p2": tier("Themes", "Prefs service")},
        "systemArchitecture": {
            "components": ["Web client", "API", "Database"],
            "connections": ["Web client calls API over HTTPS"],
            "dataFlow": ["Tasks flow from client to API to database"],
        },
        "developmentSteps": [
            {"phase": "Foundation", "tasks": ["Set up repo", "Create schema"], "priority": "P0"},
        ],
    }
    payload.update(overrides)
    return payload


def as_reply(payload: Dict[str, Any], prefix: str = "Sure! ", suffix: str = "") -> str:
    return prefix + json.dumps(payload) + suffix
