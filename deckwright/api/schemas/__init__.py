"""
API schemas.

- base: error envelope
- deck_io: plan, theme and export request/response bodies
"""

from __future__ import annotations

from .base import ErrorResponse, IssueOut
from .deck_io import (
    CommentResponse,
    ExportRequest,
    ProjectExportRequest,
    ThemeListResponse,
    ThemeSummary,
)

__all__ = [
    "CommentResponse",
    "ErrorResponse",
    "ExportRequest",
    "IssueOut",
    "ProjectExportRequest",
    "ThemeListResponse",
    "ThemeSummary",
]
