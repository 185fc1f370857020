from __future__ import annotations

import json

import pytest

from acr.core.config import Settings
from acr.core.session import ReviewSession


class FakeClient:
    """Stands in for GeminiClient: records requests, returns canned text or raises."""

    def __init__(self, response="[]"):
        self.response = response
        self.requests = []

    def generate(self, request):
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.reason = reason
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeHTTPSession:
    def __init__(self, response=None, exc=None):
        self.headers = {}
        self.response = response
        self.exc = exc
        self.calls = []
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self):
        self.closed = True


def gemini_body(text: str) -> dict:
    return {
        "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}],
        "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5},
    }


SAMPLE_RESPONSE = json.dumps(
    [
        {"line": "3", "severity": "Minor", "description": "Unused variable", "suggestion": "Remove it"},
        {"line": 10, "severity": "Critical", "description": "SQL injection", "suggestion": "Use parameters"},
        {"line": "20-25", "severity": "Info", "description": "Long function", "suggestion": "Split it"},
        {"line": "7", "severity": "Critical", "description": "Unchecked input", "suggestion": "Validate"},
    ]
)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


@pytest.fixture
def session(settings) -> ReviewSession:
    s = ReviewSession(settings)
    s.code = "x=1"
    s.language = "Python"
    return s


@pytest.fixture
def ready_session(session) -> ReviewSession:
    session.submit(FakeClient(SAMPLE_RESPONSE))
    return session
