from __future__ import annotations

from typing import Optional

RESPONSE_SCHEMA = """{
  "overview": "High-level overview of the project. Do not use markdown formatting or special characters.",
  "priorities": {
    "p0": {
      "frontend": {
        "components": [
          {
            "name": "Component name",
            "description": "Brief description without markdown or special characters",
            "requirements": ["List of key requirements"]
          }
        ]
      },
      "backend": {
        "services": [
          {
            "name": "Service name",
            "description": "Brief description without markdown or special characters",
            "requirements": ["List of key requirements"]
          }
        ],
        "dataModel": ["Key data entities and their relationships"]
      }
    },
    "p1": {
      "frontend": { "components": [] },
      "backend": { "services": [], "dataModel": [] }
    },
    "p2": {
      "frontend": { "components": [] },
      "backend": { "services": [], "dataModel": [] }
    }
  },
  "systemArchitecture": {
    "components": ["List of main system components"],
    "connections": ["List of connections between components"],
    "dataFlow": ["Description of data flow between components"]
  },
  "developmentSteps": [
    {
      "phase": "Phase name",
      "tasks": ["List of specific tasks to complete"],
      "priority": "P0/P1/P2"
    }
  ]
}"""

RULES = (
    "Focus on concrete, actionable information for building an MVP.",
    "P0 should include only the most critical components and services for a basic working prototype.",
    "P1 should include important but not critical features that enhance the basic prototype.",
    "P2 should include nice-to-have features or future enhancements.",
    "For each priority level, provide 2-4 frontend components and 1-3 backend services.",
    "The systemArchitecture should provide a clear overview of how components interact.",
    "Outline 3-4 development phases with specific tasks and priority levels.",
    "Adjust the detail level based on the depth parameter.",
    "If a focus area is provided, provide more details for that specific area.",
    "Do not use markdown formatting or special characters in any text fields.",
    "Response must be ONLY the JSON object, no other text.",
)


def focus_clause(focus_area: Optional[str]) -> str:
    return f"Focus area: {focus_area}" if focus_area else ""


def build_breakdown_prompt(idea: str, depth: int = 1, focus_area: Optional[str] = None) -> str:
    """Assemble the instruction sent to the model for one idea."""
    rules_block = "\n".join(f"{i}. {rule}" for i, rule in enumerate(RULES, start=1))
    return (
        f'Provide a comprehensive breakdown for the following project idea: "{idea}"\n\n'
        f"Depth level: {depth}\n"
        f"{focus_clause(focus_area)}\n\n"
        "Format your response as a valid JSON object with this structure:\n"
        f"{RESPONSE_SCHEMA}\n\n"
        "Rules:\n"
        f"{rules_block}\n"
    )
