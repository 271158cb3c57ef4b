"""
Deterministic plan renderer.

``render`` is a pure function from (plan, theme, tier, watermark) to the bytes
of a .pptx document. Nothing is written anywhere; either a complete buffer is
returned or ``RenderError`` is raised.
"""

from __future__ import annotations

import random
from typing import Optional

from deckwright.domain.entities.plan import Plan
from deckwright.domain.exceptions import RenderError
from deckwright.domain.themes import Theme, theme_catalog
from deckwright.domain.value_objects.tier import Tier
from deckwright.infra.config.logging_config import get_logger, operation_scope
from deckwright.infra.rendering.context import RenderContext
from deckwright.infra.rendering.layouts import dispatch_layout
from deckwright.infra.rendering.packaging import (
    DocumentMetadata,
    append_closing_slides,
    new_document,
    to_bytes,
)
from deckwright.infra.rendering.primitives import new_slide
from deckwright.infra.rendering.watermark import (
    DEFAULT_WATERMARK_TEXT,
    apply_watermark,
    resolve_watermark,
)

logger = get_logger("render")


def render(
    plan: Plan,
    theme: Optional[Theme] = None,
    tier: "Tier | str" = Tier.FREE,
    *,
    watermark_image: Optional[bytes] = None,
    watermark_text: Optional[str] = None,
    metadata: Optional[DocumentMetadata] = None,
    rng: Optional[random.Random] = None,
) -> bytes:
    """
    Render a validated plan into .pptx bytes.

    Args:
        plan: Validated plan; never mutated
        theme: Look for the whole document; a random catalog theme when omitted
        tier: Subscription tier; only free output is watermarked
        watermark_image: Optional logo for the free-tier overlay
        watermark_text: Overlay text used when no logo is supplied
        metadata: Author and company strings
        rng: Source of randomness for theme selection

    Returns:
        The complete document as bytes

    Raises:
        RenderError: Nothing usable could be produced
    """
    resolved_tier = Tier.parse(tier)
    ctx = RenderContext(
        theme=theme or theme_catalog.random(rng),
        tier=resolved_tier,
        watermark=resolve_watermark(
            resolved_tier, watermark_image, watermark_text or DEFAULT_WATERMARK_TEXT
        ),
    )
    with operation_scope("render", theme=ctx.theme.key, tier=resolved_tier.value):
        logger.info(
            "render.start",
            slides=len(plan.slides),
            watermark=type(ctx.watermark).__name__ if ctx.watermark else None,
        )
        content = _build(plan, ctx, metadata)
        logger.info("render.done", slides=ctx.slide_index, size=len(content))
    return content


def _build(plan: Plan, ctx: RenderContext, metadata: Optional[DocumentMetadata]) -> bytes:
    try:
        prs = new_document(plan, metadata)
        for plan_slide in plan.slides:
            slide = new_slide(prs, ctx)
            dispatch_layout(plan_slide.layout)(slide, plan_slide, ctx)
            apply_watermark(slide, ctx)
            ctx.advance()
        append_closing_slides(prs, plan, ctx)
        content = to_bytes(prs)
    except RenderError as exc:
        logger.error("render.failed", error=exc.detail, slide_index=ctx.slide_index)
        raise
    except Exception as exc:
        logger.error("render.failed", error=str(exc), slide_index=ctx.slide_index)
        raise RenderError(f"{type(exc).__name__}: {exc}") from exc

    return content
