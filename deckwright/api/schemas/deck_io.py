"""
Request/response schemas for plans, themes and exports.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from deckwright.domain.value_objects.tier import Tier


class CommentResponse(BaseModel):
    comment: str = Field(..., description="Two or three sentences on the topic")


class ThemeColorsOut(BaseModel):
    primary: str
    background: str
    text: str


class ThemeSummary(BaseModel):
    key: str = Field(..., description="Catalog key, e.g. 'minimal'")
    name: str = Field(..., description="Display name")
    available: bool = Field(..., description="Whether the tier may use it")
    colors: ThemeColorsOut


class ThemeListResponse(BaseModel):
    tier: Tier
    themes: List[ThemeSummary]


class ExportRequest(BaseModel):
    """Render an arbitrary plan; the plan is validated before rendering."""

    plan: Dict[str, Any] = Field(..., description="Slide plan in wire form")
    theme: Optional[str] = Field(None, description="Theme key; gated by tier")
    tier: Tier = Field(Tier.FREE, description="Subscription tier of the caller")


class ProjectExportRequest(BaseModel):
    theme: Optional[str] = Field(None, description="Theme key; gated by tier")
    tier: Tier = Field(Tier.FREE, description="Subscription tier of the caller")
