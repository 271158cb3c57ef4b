"""
Domain error kinds.

Every error carries a stable ``code`` and a user-presentable ``message``. Raw
upstream error text never goes into ``message``; it is kept on ``detail`` for
logging only.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from deckwright.application.ports import QuotaCheck
    from deckwright.domain.entities.plan import ValidationIssue


class DeckwrightError(Exception):
    """Base class for all deckwright errors."""

    code = "DECKWRIGHT_ERROR"

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ExtractionError(DeckwrightError):
    """No JSON object could be located in the model output."""

    code = "EXTRACTION_ERROR"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__("The model response did not contain a JSON object", detail)


class SchemaValidationError(DeckwrightError):
    """A candidate plan violated the structural or cross-field rules."""

    code = "SCHEMA_VALIDATION_ERROR"

    def __init__(self, issues: List["ValidationIssue"]) -> None:
        super().__init__(f"Slide plan failed validation ({len(issues)} issue(s))")
        self.issues = list(issues)


class SynthesisFailed(DeckwrightError):
    """Validation still failed after the single repair attempt."""

    code = "SYNTHESIS_FAILED"

    def __init__(
        self,
        issues: Optional[List["ValidationIssue"]] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(
            "Could not generate a valid slide plan. Please try again.", detail
        )
        self.issues = list(issues or [])


class UpstreamReason(str, Enum):
    RATE_LIMITED = "rate_limited"
    QUOTA_EXCEEDED = "quota_exceeded"
    TIMEOUT = "timeout"
    NETWORK = "network"
    SERVICE_ERROR = "service_error"


_UPSTREAM_MESSAGES = {
    UpstreamReason.RATE_LIMITED: "The AI service is busy right now. Please retry in a moment.",
    UpstreamReason.QUOTA_EXCEEDED: "The AI service quota is exhausted. Please try again later.",
    UpstreamReason.TIMEOUT: "The AI service took too long to respond. Please try again.",
    UpstreamReason.NETWORK: "Could not reach the AI service. Please try again.",
    UpstreamReason.SERVICE_ERROR: "The AI service returned an error. Please try again later.",
}


class UpstreamUnavailable(DeckwrightError):
    """The language-model service failed (network, timeout, rate limit, quota)."""

    code = "UPSTREAM_UNAVAILABLE"

    def __init__(
        self,
        reason: UpstreamReason,
        detail: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> None:
        super().__init__(_UPSTREAM_MESSAGES[reason], detail)
        self.reason = reason
        self.retry_after = retry_after


class RenderError(DeckwrightError):
    """Rendering aborted; no partial document is ever returned."""

    code = "RENDER_ERROR"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__("Failed to build the presentation file", detail)


class InsufficientTokens(DeckwrightError):
    code = "INSUFFICIENT_TOKENS"

    def __init__(self, check: "QuotaCheck") -> None:
        super().__init__("Insufficient tokens for this action")
        self.check = check


class PlanNotFound(DeckwrightError):
    code = "PLAN_NOT_FOUND"

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project {project_id} has no slide plan")
        self.project_id = project_id
