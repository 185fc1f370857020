"""State of one user's review interaction.

The session is the only place findings, errors and the severity filter are
mutated. A review moves it through::

    IDLE | READY | FAILED --start--> SUBMITTING --complete--> READY
                                                --fail------> FAILED

Every ``start`` bumps ``generation``; a result carrying an older generation is
dropped, so a slow response can never overwrite a newer review.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from acr.core.config import Settings
from acr.core.errors import InvalidInput, ProviderCommunicationError, ReviewError
from acr.core.report import generate_markdown_report
from acr.core.request import ReviewRequest, build_review_request
from acr.core.schemas import ALL, FILTER_OPTIONS, Finding
from acr.core.validator import parse_findings
from acr.core.view import count_by_severity, filter_findings
from acr.utils.fs import SUPPORTED_LANGUAGES, decode_bytes, detect_language

logger = logging.getLogger(__name__)


class ReviewStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    READY = "ready"
    FAILED = "failed"


class ReviewSession:
    """Single-writer review state.

    ``client`` arguments are anything with ``generate(ReviewRequest) -> str``,
    normally a :class:`acr.core.provider.GeminiClient` built once at startup.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.code = ""
        self.language = SUPPORTED_LANGUAGES[0]
        self.structured = False
        self.status = ReviewStatus.IDLE
        self.findings: Optional[List[Finding]] = None
        self.error: Optional[ReviewError] = None
        self.severity_filter = ALL
        self.generation = 0

    def load_upload(self, filename: str, data: Union[bytes, str]) -> None:
        """Replace the source text with an uploaded file and pre-select its language."""
        self.code = decode_bytes(data) if isinstance(data, bytes) else data
        language = detect_language(filename)
        if language:
            self.language = language
        logger.info("Loaded %s (%d chars, language=%s)", filename, len(self.code), self.language)

    def clear(self) -> None:
        self.code = ""

    @property
    def is_loading(self) -> bool:
        return self.status is ReviewStatus.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return not self.is_loading and bool(self.code.strip())

    def start(self) -> Optional[int]:
        """Enter SUBMITTING and return the new generation.

        Returns None while a review is already in flight.
        """
        if self.is_loading:
            logger.info("Ignoring submission: review %d still in flight", self.generation)
            return None
        if not self.code.strip():
            raise InvalidInput()

        self.generation += 1
        self.status = ReviewStatus.SUBMITTING
        self.findings = None
        self.error = None
        self.severity_filter = ALL
        return self.generation

    def _accepts(self, generation: int) -> bool:
        if self.status is not ReviewStatus.SUBMITTING or generation != self.generation:
            logger.info("Discarding stale result for review %d (current %d)", generation, self.generation)
            return False
        return True

    def complete(self, generation: int, findings: List[Finding]) -> bool:
        if not self._accepts(generation):
            return False
        self.findings = list(findings)
        self.status = ReviewStatus.READY
        logger.info("Review %d ready with %d findings", generation, len(self.findings))
        return True

    def fail(self, generation: int, error: ReviewError) -> bool:
        if not self._accepts(generation):
            return False
        self.error = error
        self.status = ReviewStatus.FAILED
        logger.warning("Review %d failed: %s", generation, error)
        return True

    def cancel(self) -> bool:
        """Stop waiting for the in-flight review; its result will be discarded."""
        if not self.is_loading:
            return False
        self.generation += 1
        self.status = ReviewStatus.IDLE
        return True

    def build_request(self) -> ReviewRequest:
        return build_review_request(
            self.code,
            self.language,
            settings=self.settings,
            structured=self.structured,
        )

    def _begin(self) -> Optional[Tuple[int, ReviewRequest]]:
        if self.is_loading:
            logger.info("Ignoring submission: review %d still in flight", self.generation)
            return None
        request = self.build_request()
        return self.start(), request

    def submit(self, client) -> bool:
        """Run a review to completion. Returns False if the submission was ignored."""
        begun = self._begin()
        if begun is None:
            return False
        generation, request = begun

        try:
            findings = parse_findings(client.generate(request))
        except ReviewError as e:
            self.fail(generation, e)
        except Exception as e:
            logger.exception("Unexpected error during review %d", generation)
            self.fail(generation, ProviderCommunicationError(str(e)))
        else:
            self.complete(generation, findings)
        return True

    async def submit_async(self, client, timeout: Optional[float] = None) -> bool:
        """Like :meth:`submit`, with the provider call off the event loop and a timeout."""
        begun = self._begin()
        if begun is None:
            return False
        generation, request = begun

        timeout = self.settings.timeout if timeout is None else timeout
        try:
            raw = await asyncio.wait_for(asyncio.to_thread(client.generate, request), timeout)
            findings = parse_findings(raw)
        except asyncio.TimeoutError:
            self.fail(generation, ProviderCommunicationError(f"no response after {timeout:g}s"))
        except ReviewError as e:
            self.fail(generation, e)
        except Exception as e:
            logger.exception("Unexpected error during review %d", generation)
            self.fail(generation, ProviderCommunicationError(str(e)))
        else:
            self.complete(generation, findings)
        return True

    def toggle_resolved(self, finding_id: int) -> bool:
        """Flip ``resolved`` on one finding. Unknown ids are ignored."""
        if self.status is not ReviewStatus.READY or not self.findings:
            return False
        if not any(f.id == finding_id for f in self.findings):
            return False
        self.findings = [
            f.model_copy(update={"resolved": not f.resolved}) if f.id == finding_id else f
            for f in self.findings
        ]
        return True

    def set_filter(self, severity_filter: str) -> None:
        if severity_filter not in FILTER_OPTIONS:
            raise ValueError(f"Unknown severity filter: {severity_filter!r}")
        self.severity_filter = severity_filter

    def visible_findings(self) -> List[Finding]:
        return filter_findings(self.findings or [], self.severity_filter)

    def counts(self) -> Dict[str, int]:
        return count_by_severity(self.findings or [])

    def report(self) -> str:
        return generate_markdown_report(self.findings or [])

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return f"Failed to get review. {self.error.user_message}"
