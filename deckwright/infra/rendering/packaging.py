"""
Document packaging: metadata, generated closing slides, filename and bytes.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlparse

from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE
from pptx.util import Inches

from deckwright.domain.entities.plan import REFERENCES_TITLE, Plan
from deckwright.infra.rendering.geometry import SAFE_AREA, SLIDE_HEIGHT_IN, SLIDE_WIDTH_IN, Rect
from deckwright.infra.rendering.layouts import BULLET_LIMIT, CONTENT_TITLE, add_heading
from deckwright.infra.rendering.primitives import (
    add_bullets,
    add_decoration,
    add_text,
    add_underline,
    new_slide,
)
from deckwright.infra.rendering.watermark import apply_watermark

if TYPE_CHECKING:
    from pptx.presentation import Presentation as PresentationType

    from deckwright.domain.themes import Theme
    from deckwright.domain.value_objects.tier import Tier
    from deckwright.infra.rendering.context import RenderContext

PPTX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)
CLOSING_TEXT = "Thank You!"
FALLBACK_SLUG = "presentation"
_BARE_HOST = re.compile(r"^(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}(?:[/?#]\S*)?$")


@dataclass(frozen=True)
class DocumentMetadata:
    author: str = "Deckwright"
    company: str = "Deckwright"


@dataclass(frozen=True)
class ExportedDeck:
    filename: str
    content: bytes
    media_type: str = PPTX_MEDIA_TYPE


def slugify(title: Optional[str]) -> str:
    slug = (title or "").lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug or FALLBACK_SLUG


def deck_filename(title: Optional[str], today: Optional[date] = None) -> str:
    """``{slug}-{YYYY-MM-DD}.pptx``; the date defaults to today in UTC."""
    stamp = (today or datetime.now(timezone.utc).date()).isoformat()
    return f"{slugify(title)}-{stamp}.pptx"


def new_document(plan: Plan, metadata: Optional[DocumentMetadata] = None) -> "PresentationType":
    """Empty 16:9 presentation carrying the document-level properties."""
    metadata = metadata or DocumentMetadata()
    prs = Presentation()
    prs.slide_width = Inches(SLIDE_WIDTH_IN)
    prs.slide_height = Inches(SLIDE_HEIGHT_IN)

    props = prs.core_properties
    props.title = plan.project_title
    props.subject = plan.project_title
    props.author = metadata.author
    props.last_modified_by = metadata.author
    # core properties have no company field
    props.comments = metadata.company
    props.keywords = plan.language
    props.revision = 1
    return prs


def reference_href(url: str) -> Optional[str]:
    """Hyperlink target for a cited url, or None when it should stay plain text.

    Absolute http(s) urls link as-is; bare hosts such as ``www.nature.com/x``
    get an ``https://`` prefix. DOIs, relative paths and free text do not link.
    """
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https"):
        return url if parsed.netloc else None
    if _BARE_HOST.match(url):
        return f"https://{url}"
    return None


def _references_slide(prs: "PresentationType", plan: Plan, ctx: "RenderContext") -> None:
    slide = new_slide(prs, ctx)
    add_heading(slide, REFERENCES_TITLE, ctx, CONTENT_TITLE, large=False)
    add_underline(slide, Rect(2.0, 1.8, 6.0, 0.08), ctx)
    references = plan.references or ()
    top = 2.05
    add_bullets(
        slide,
        Rect(SAFE_AREA.x, top, SAFE_AREA.w, SAFE_AREA.bottom - top - 0.2),
        [ref.label or ref.url for ref in references],
        ctx,
        limit=BULLET_LIMIT,
        links=[reference_href(ref.url) for ref in references],
        name="References",
    )
    apply_watermark(slide, ctx)
    ctx.advance()


def _closing_slide(prs: "PresentationType", ctx: "RenderContext") -> None:
    theme = ctx.theme
    slide = new_slide(prs, ctx)
    add_text(
        slide,
        Rect(1.0, 2.0, 8.0, 1.5),
        CLOSING_TEXT,
        font=theme.fonts.primary,
        size=theme.sizes.title,
        color=theme.colors.text,
        bold=True,
        shadow=theme.design.use_shadows,
        name="Closing",
    )
    add_decoration(
        slide,
        MSO_SHAPE.RECTANGLE,
        Rect.centered(5.0, 4.2, 0.6, 0.6),
        theme.colors.accent,
        rotation=45,
    )
    apply_watermark(slide, ctx)
    ctx.advance()


def needs_references_slide(plan: Plan) -> bool:
    return bool(plan.references) and not plan.has_references_slide()


def append_closing_slides(prs: "PresentationType", plan: Plan, ctx: "RenderContext") -> None:
    """References slide (when the plan cites sources and lacks one), then Thank You."""
    if needs_references_slide(plan):
        _references_slide(prs, plan, ctx)
    _closing_slide(prs, ctx)


def to_bytes(prs: "PresentationType") -> bytes:
    buffer = io.BytesIO()
    prs.save(buffer)
    return buffer.getvalue()


def export_deck(
    plan: Plan,
    theme: Optional["Theme"] = None,
    tier: "Tier | str" = "free",
    *,
    watermark_image: Optional[bytes] = None,
    watermark_text: Optional[str] = None,
    metadata: Optional[DocumentMetadata] = None,
    today: Optional[date] = None,
) -> ExportedDeck:
    """Render the plan and wrap the bytes with their download filename."""
    from deckwright.infra.rendering.renderer import render

    content = render(
        plan,
        theme,
        tier,
        watermark_image=watermark_image,
        watermark_text=watermark_text,
        metadata=metadata,
    )
    return ExportedDeck(filename=deck_filename(plan.project_title, today), content=content)
