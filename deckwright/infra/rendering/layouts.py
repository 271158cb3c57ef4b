"""
Per-layout composition routines and the layout router.

Each routine draws one plan slide onto an already created blank slide. Every
coordinate below lies inside ``SAFE_AREA`` (x 0.8-9.2, y 0.7-5.2), rotated
decorations included.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Optional, Union

from pptx.enum.shapes import MSO_SHAPE

from deckwright.domain.entities.plan import Slide as PlanSlide
from deckwright.domain.entities.plan import SlideLayout
from deckwright.infra.config.logging_config import get_logger
from deckwright.infra.rendering.geometry import SAFE_AREA, Rect
from deckwright.infra.rendering.primitives import (
    add_bullets,
    add_decoration,
    add_frame,
    add_text,
    add_underline,
    truncate,
)

if TYPE_CHECKING:
    from pptx.slide import Slide

    from deckwright.infra.rendering.context import RenderContext

logger = get_logger("render.layouts")

TITLE_LIMIT = 100
SUBTITLE_LIMIT = 160
BULLET_LIMIT = 300
QUOTE_LIMIT = 240
ATTRIBUTION_LIMIT = 120

LayoutRoutine = Callable[["Slide", PlanSlide, "RenderContext"], None]

# title box of content slides; generated slides reuse it
CONTENT_TITLE = Rect(SAFE_AREA.x, 0.85, SAFE_AREA.w, 0.9)


def _diamond(cx: float, cy: float, size: float) -> Rect:
    return Rect.centered(cx, cy, size, size)


def add_heading(
    slide: "Slide", text: str, ctx: "RenderContext", rect: Rect, *, large: bool
) -> None:
    theme = ctx.theme
    add_text(
        slide,
        rect,
        truncate(text, TITLE_LIMIT),
        font=theme.fonts.primary,
        size=theme.sizes.title if large else theme.sizes.h2,
        color=theme.colors.text,
        bold=True,
        shadow=theme.design.use_shadows,
        name="Title",
    )


def add_subtitle(slide: "Slide", text: Optional[str], ctx: "RenderContext", rect: Rect) -> None:
    if not text:
        return
    theme = ctx.theme
    add_text(
        slide,
        rect,
        truncate(text, SUBTITLE_LIMIT),
        font=theme.fonts.accent,
        size=theme.sizes.caption,
        color=theme.colors.muted,
        italic=True,
        name="Subtitle",
    )


# ---------- layouts ----------
def render_title(slide: "Slide", plan_slide: PlanSlide, ctx: "RenderContext") -> None:
    """Large centered title over background shapes, with an accent underline."""
    colors = ctx.theme.colors
    decorate = ctx.theme.design.use_decorative_elements

    if decorate:
        add_decoration(slide, MSO_SHAPE.RECTANGLE, _diamond(1.45, 1.35, 0.8),
                       colors.primary, alpha=0.8, rotation=45)
        add_decoration(slide, MSO_SHAPE.OVAL, Rect(8.1, 0.9, 0.9, 0.9),
                       colors.secondary, alpha=0.7)
        add_decoration(slide, MSO_SHAPE.ISOSCELES_TRIANGLE, Rect(7.9, 3.9, 1.0, 1.0),
                       colors.accent, alpha=0.75)

    add_heading(slide, plan_slide.title, ctx, Rect(SAFE_AREA.x, 1.7, SAFE_AREA.w, 1.8), large=True)
    add_underline(slide, Rect(2.0, 4.2, 6.0, 0.12), ctx)

    if decorate:
        add_decoration(slide, MSO_SHAPE.RECTANGLE, _diamond(1.64, 4.74, 0.28),
                       colors.accent, rotation=45)
        add_decoration(slide, MSO_SHAPE.RECTANGLE, _diamond(8.34, 4.74, 0.28),
                       colors.primary, rotation=45)


def render_title_bullets(slide: "Slide", plan_slide: PlanSlide, ctx: "RenderContext") -> None:
    """Smaller title, underline, then every bullet in a single text block."""
    colors = ctx.theme.colors
    decorate = ctx.theme.design.use_decorative_elements

    if decorate:
        add_decoration(slide, MSO_SHAPE.RECTANGLE, Rect(0.8, 0.7, 1.8, 0.12), colors.primary)
        add_decoration(slide, MSO_SHAPE.RECTANGLE, Rect(7.4, 0.7, 1.8, 0.12), colors.secondary)

    add_heading(slide, plan_slide.title, ctx, CONTENT_TITLE, large=False)
    add_underline(slide, Rect(2.0, 1.8, 6.0, 0.08), ctx)

    top = 2.05
    add_bullets(
        slide,
        Rect(SAFE_AREA.x, top, SAFE_AREA.w, SAFE_AREA.bottom - top - 0.2),
        plan_slide.bullets or (),
        ctx,
        limit=BULLET_LIMIT,
    )

    if decorate:
        add_decoration(slide, MSO_SHAPE.RECTANGLE, _diamond(8.775, 4.675, 0.35),
                       colors.accent, alpha=0.6, rotation=45)
        add_decoration(slide, MSO_SHAPE.ISOSCELES_TRIANGLE, _diamond(1.04, 4.89, 0.28),
                       colors.primary, alpha=0.5, rotation=30)


def render_section(slide: "Slide", plan_slide: PlanSlide, ctx: "RenderContext") -> None:
    """Divider: large title, optional subtitle taken from the speaker notes."""
    colors = ctx.theme.colors
    decorate = ctx.theme.design.use_decorative_elements

    if decorate:
        add_decoration(slide, MSO_SHAPE.OVAL, Rect(0.8, 0.7, 2.0, 2.0), colors.primary, alpha=0.15)
        add_decoration(slide, MSO_SHAPE.OVAL, Rect(7.2, 3.2, 2.0, 2.0), colors.secondary, alpha=0.15)
    add_decoration(slide, MSO_SHAPE.RECTANGLE, Rect(1.0, 1.2, 8.0, 0.15), colors.accent,
                   rotation=-5, name="Bar")
    add_decoration(slide, MSO_SHAPE.RECTANGLE, Rect(1.0, 4.6, 8.0, 0.15), colors.primary,
                   rotation=5, name="Bar")

    add_heading(slide, plan_slide.title, ctx, Rect(SAFE_AREA.x, 1.75, SAFE_AREA.w, 1.6), large=True)
    add_subtitle(slide, plan_slide.speaker_notes, ctx, Rect(SAFE_AREA.x, 3.45, SAFE_AREA.w, 0.7))

    if decorate:
        add_decoration(slide, MSO_SHAPE.RECTANGLE, _diamond(1.1, 0.99, 0.4),
                       colors.accent, rotation=45)
        add_decoration(slide, MSO_SHAPE.RECTANGLE, _diamond(8.9, 4.91, 0.4),
                       colors.primary, rotation=45)


def render_quote(slide: "Slide", plan_slide: PlanSlide, ctx: "RenderContext") -> None:
    """Title as the quotation, speaker notes as attribution, two nested frames."""
    theme = ctx.theme
    colors = theme.colors

    if theme.design.use_decorative_elements:
        add_decoration(slide, MSO_SHAPE.OVAL, Rect(1.0, 0.75, 0.4, 0.4), colors.primary, alpha=0.8)
        add_decoration(slide, MSO_SHAPE.OVAL, Rect(8.6, 4.7, 0.4, 0.4), colors.secondary, alpha=0.8)

    add_frame(slide, Rect(0.8, 1.2, 8.4, 3.2), colors.accent, ctx,
              width_pt=theme.design.line_weight_pt + 1, name="Outer Frame")
    add_frame(slide, Rect(1.2, 1.6, 7.6, 2.4), colors.primary, ctx, width_pt=1, name="Inner Frame")

    add_text(
        slide,
        Rect(1.5, 2.0, 7.0, 1.6),
        truncate(plan_slide.title, QUOTE_LIMIT),
        font=theme.fonts.accent,
        size=theme.sizes.h2,
        color=colors.text,
        italic=True,
        shadow=theme.design.use_shadows,
        margin_pt=8,
        name="Quote",
    )
    if plan_slide.speaker_notes:
        add_text(
            slide,
            Rect(2.0, 4.55, 6.0, 0.35),
            truncate(plan_slide.speaker_notes, ATTRIBUTION_LIMIT),
            font=theme.fonts.secondary,
            size=theme.sizes.caption,
            color=colors.muted,
            bold=True,
            margin_pt=2,
            name="Attribution",
        )
    add_underline(slide, Rect(2.0, 5.0, 6.0, 0.12), ctx)


def render_image(slide: "Slide", plan_slide: PlanSlide, ctx: "RenderContext") -> None:
    """Title plus a decorative frame around the region reserved for an image."""
    theme = ctx.theme
    colors = theme.colors

    add_frame(slide, Rect(0.9, 0.8, 8.2, 4.3), colors.accent, ctx, name="Frame")
    add_heading(slide, plan_slide.title, ctx, Rect(1.2, 1.0, 7.6, 0.9), large=False)
    add_frame(slide, Rect(1.2, 2.1, 7.6, 2.7), colors.muted, ctx, width_pt=1, name="Image Region")

    if theme.design.use_decorative_elements:
        add_decoration(slide, MSO_SHAPE.OVAL, Rect(8.45, 0.95, 0.4, 0.4), colors.primary)
        add_decoration(slide, MSO_SHAPE.ISOSCELES_TRIANGLE, _diamond(1.175, 4.775, 0.35),
                       colors.secondary, rotation=45)


LAYOUT_ROUTINES: Dict[SlideLayout, LayoutRoutine] = {
    SlideLayout.TITLE: render_title,
    SlideLayout.TITLE_BULLETS: render_title_bullets,
    SlideLayout.SECTION: render_section,
    SlideLayout.QUOTE: render_quote,
    SlideLayout.IMAGE: render_image,
}


def dispatch_layout(value: Union[SlideLayout, str, None]) -> LayoutRoutine:
    """Routine for a layout tag; unknown or missing tags get title-bullets."""
    if isinstance(value, SlideLayout):
        layout = value
    elif value is None:
        layout = SlideLayout.TITLE_BULLETS
    else:
        try:
            layout = SlideLayout(value)
        except ValueError:
            logger.warning("render.layout.unknown", layout=value)
            layout = SlideLayout.TITLE_BULLETS
    return LAYOUT_ROUTINES[layout]

