from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel

from acr.core.config import Settings
from acr.core.errors import InvalidInput
from acr.core.schemas import SEVERITIES


def _load_prompt(name: str) -> str:
    here = Path(__file__).resolve().parents[1] / "prompts"
    return (here / name).read_text(encoding="utf-8").strip()


SYSTEM_PROMPT = _load_prompt("system.txt")
STRUCTURED_PROMPT = _load_prompt("structured.txt")
REVIEW_PROMPT = _load_prompt("review.txt")

# The provider enforces this shape on its output.
REVIEW_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "line": {
                "type": "STRING",
                "description": "The line number(s) where the issue occurs (e.g., '15' or '20-25').",
            },
            "severity": {
                "type": "STRING",
                "format": "enum",
                "enum": list(SEVERITIES),
                "description": "The severity of the issue. Must be one of: 'Critical', 'Major', 'Minor', 'Info'.",
            },
            "description": {
                "type": "STRING",
                "description": "A clear and concise explanation of the code issue.",
            },
            "suggestion": {
                "type": "STRING",
                "description": "A concrete suggestion on how to fix the issue, including code snippets if applicable.",
            },
        },
        "required": ["line", "severity", "description", "suggestion"],
        "propertyOrdering": ["line", "severity", "description", "suggestion"],
    },
}


class ReviewRequest(BaseModel):
    content: str
    system_instruction: str
    response_schema: Dict[str, Any]
    temperature: float
    max_output_tokens: int
    thinking_budget: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        """Render the body of a ``generateContent`` call."""
        generation_config: Dict[str, Any] = {
            "responseMimeType": "application/json",
            "responseSchema": self.response_schema,
            "temperature": self.temperature,
            "maxOutputTokens": self.max_output_tokens,
        }
        if self.thinking_budget is not None:
            generation_config["thinkingConfig"] = {"thinkingBudget": self.thinking_budget}

        return {
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": self.content}]}],
            "generationConfig": generation_config,
        }


def build_system_instruction(structured: bool = False) -> str:
    if not structured:
        return SYSTEM_PROMPT
    return f"{SYSTEM_PROMPT}\n\n{STRUCTURED_PROMPT}"


def build_review_request(
    code: str,
    language: str,
    *,
    settings: Settings,
    structured: bool = False,
) -> ReviewRequest:
    if not code or not code.strip():
        raise InvalidInput()

    return ReviewRequest(
        content=REVIEW_PROMPT.format(language=language, code=code),
        system_instruction=build_system_instruction(structured),
        response_schema=REVIEW_SCHEMA,
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
        thinking_budget=settings.thinking_budget,
    )
