"""
FastAPI router for rendering arbitrary plans.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response
from starlette.concurrency import run_in_threadpool

from deckwright.api.dependencies import get_document_metadata, get_watermark_image
from deckwright.api.schemas import ExportRequest
from deckwright.application.use_cases.export_project import select_theme
from deckwright.domain.entities.plan import Plan, validate_plan
from deckwright.domain.exceptions import SchemaValidationError
from deckwright.domain.themes import theme_catalog
from deckwright.infra.config.logging_config import get_logger
from deckwright.infra.config.settings import get_settings
from deckwright.infra.rendering.packaging import DocumentMetadata, ExportedDeck, export_deck

router = APIRouter(prefix="/exports", tags=["exports"])
log = get_logger("api.exports")


def attachment(deck: ExportedDeck) -> Response:
    return Response(
        content=deck.content,
        media_type=deck.media_type,
        headers={"Content-Disposition": f'attachment; filename="{deck.filename}"'},
    )


@router.post("")
async def export_plan(
    request: ExportRequest,
    metadata: DocumentMetadata = Depends(get_document_metadata),
    watermark_image: Optional[bytes] = Depends(get_watermark_image),
) -> Response:
    """
    Render a plan into a .pptx download.

    The plan is validated before anything is drawn; schema problems answer 422
    with the issue list.
    """
    result = validate_plan(request.plan)
    if not isinstance(result, Plan):
        raise SchemaValidationError(result)

    settings = get_settings()
    theme = select_theme(theme_catalog, request.theme, request.tier, settings.default_theme)
    log.info("export.request", tier=request.tier.value, theme=theme.key, slides=len(result.slides))

    deck = await run_in_threadpool(
        export_deck,
        result,
        theme,
        request.tier,
        watermark_image=watermark_image,
        watermark_text=settings.watermark_text,
        metadata=metadata,
    )
    log.info("export.success", filename=deck.filename, size=len(deck.content))
    return attachment(deck)
