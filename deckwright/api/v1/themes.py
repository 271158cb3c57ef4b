"""
FastAPI router for the theme catalog.
"""

from fastapi import APIRouter, Query

from deckwright.api.schemas import ThemeListResponse, ThemeSummary
from deckwright.domain.themes import theme_catalog
from deckwright.domain.value_objects.tier import Tier
from deckwright.infra.config.logging_config import get_logger

router = APIRouter(prefix="/themes", tags=["themes"])
log = get_logger("api.themes")


@router.get("", response_model=ThemeListResponse)
async def list_themes(tier: str = Query("free", description="Subscription tier")) -> ThemeListResponse:
    """List every catalog theme with its availability for ``tier``."""
    resolved = Tier.parse(tier)
    log.info("themes.list", tier=resolved.value)
    return ThemeListResponse(
        tier=resolved,
        themes=[ThemeSummary(**entry) for entry in theme_catalog.describe(resolved)],
    )
