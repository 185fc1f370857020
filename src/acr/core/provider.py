"""HTTP client for the Gemini ``generateContent`` endpoint."""

from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from acr.core.config import Settings
from acr.core.errors import ProviderCommunicationError
from acr.core.request import ReviewRequest

logger = logging.getLogger(__name__)


class GeminiClient:
    """Long-lived provider client.

    Construct one at startup and pass it to whoever needs it; call ``close``
    (or use it as a context manager) on shutdown.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self._session = session or requests.Session()
        self._session.headers.update({"x-goog-api-key": settings.api_key})
        logger.info("Provider client initialized: model=%s", settings.model)

    @property
    def url(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/models/{self.settings.model}:generateContent"

    def generate(self, request: ReviewRequest) -> str:
        """Send one review request and return the model's raw text."""
        start = time.monotonic()
        try:
            r = self._session.post(url=self.url, json=request.to_payload(), timeout=self.settings.timeout)
        except requests.RequestException as e:
            logger.error("Provider request failed after %.1fs: %s", time.monotonic() - start, e)
            raise ProviderCommunicationError(str(e)) from e

        latency_ms = int((time.monotonic() - start) * 1000)

        if not r.ok:
            detail = _error_detail(r)
            logger.error("Provider error %d from model=%s: %s", r.status_code, self.settings.model, detail)
            raise ProviderCommunicationError(f"{r.status_code} {detail}", status_code=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            raise ProviderCommunicationError("the service returned a non-JSON response") from e

        usage = data.get("usageMetadata") or {}
        logger.info(
            "Provider usage: input=%s output=%s thinking=%s latency=%dms model=%s",
            usage.get("promptTokenCount", 0),
            usage.get("candidatesTokenCount", 0),
            usage.get("thoughtsTokenCount", 0),
            latency_ms,
            self.settings.model,
        )

        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise ProviderCommunicationError(f"the request was blocked ({block_reason})")

        return _candidate_text(data)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _error_detail(r: requests.Response) -> str:
    try:
        message = r.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return message or r.reason or "request failed"


def _candidate_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        logger.info("Provider returned no candidates")
        return ""

    candidate = candidates[0]
    if candidate.get("finishReason") == "MAX_TOKENS":
        logger.warning("Response truncated (hit maxOutputTokens); output may be incomplete")

    parts = (candidate.get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if not p.get("thought"))
