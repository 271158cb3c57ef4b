"""
Base schemas shared by all API responses.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IssueOut(BaseModel):
    """One schema violation, addressed by dotted field path."""

    path: str = Field(..., description="Dotted field path, e.g. slides.2.bullets")
    message: str = Field(..., description="What is wrong with the field")


class ErrorResponse(BaseModel):
    """Standard error response format."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Error type or code")
    detail: str = Field(..., description="Human-readable error description")
    issues: Optional[List[IssueOut]] = Field(None, description="Schema violations, if any")
    retry_after_seconds: Optional[int] = Field(
        None, alias="retryAfterSeconds", description="Suggested wait before retrying"
    )
    timestamp: datetime = Field(default_factory=_utcnow)
