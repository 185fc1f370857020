"""Turn the provider's raw text into validated findings."""

from __future__ import annotations

import json
import logging
from typing import List

from pydantic import ValidationError

from acr.core.errors import MalformedResponse
from acr.core.schemas import Finding

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("line", "severity", "description", "suggestion")

_RAW_LOG_LIMIT = 2000


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned

    newline_pos = cleaned.find("\n")
    if newline_pos == -1:
        return ""
    cleaned = cleaned[newline_pos + 1 :]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_findings(raw: str) -> List[Finding]:
    """Validate a provider response.

    An empty body means "no issues". Anything that is not a JSON array of
    complete findings rejects the whole batch with MalformedResponse.
    """
    cleaned = _strip_code_fence(raw or "")
    if not cleaned:
        logger.info("Received an empty response from the provider, assuming no issues")
        return []

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse provider response as JSON: %s. Raw: %s", e, raw[:_RAW_LOG_LIMIT])
        raise MalformedResponse(f"non-JSON response: {e}") from e

    if not isinstance(data, list):
        logger.warning("Provider response is %s, not an array. Raw: %s", type(data).__name__, raw[:_RAW_LOG_LIMIT])
        raise MalformedResponse("response was valid JSON but not an array")

    findings: List[Finding] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning("Finding %d is not an object. Raw: %s", idx, raw[:_RAW_LOG_LIMIT])
            raise MalformedResponse(f"finding {idx} is not an object")

        missing = [k for k in REQUIRED_FIELDS if item.get(k) is None]
        if missing:
            logger.warning("Finding %d is missing %s. Raw: %s", idx, ", ".join(missing), raw[:_RAW_LOG_LIMIT])
            raise MalformedResponse(f"finding {idx} is missing {', '.join(missing)}")

        # only the four provider fields; ``resolved`` always starts out False
        try:
            findings.append(Finding.model_validate({"id": idx, **{k: item[k] for k in REQUIRED_FIELDS}}))
        except ValidationError as e:
            logger.warning("Finding %d failed validation: %s", idx, e)
            raise MalformedResponse(f"finding {idx} is invalid") from e

    return findings
