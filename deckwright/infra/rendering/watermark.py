"""
Tier-gated watermark overlay.

The asset is chosen once per render by ``resolve_watermark``; each slide then
just asks the asset to draw itself, last, above everything else.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.parts.image import Image as PptxImage
from pptx.util import Inches

from deckwright.domain.value_objects.tier import Tier
from deckwright.infra.rendering.geometry import Rect
from deckwright.infra.rendering.primitives import (
    add_text,
    check_placement,
    set_picture_alpha,
    set_text_alpha,
)

if TYPE_CHECKING:
    from pptx.slide import Slide

    from deckwright.infra.rendering.context import RenderContext

WATERMARK_NAME = "Watermark"
WATERMARK_ROTATION = -30.0
WATERMARK_OPACITY = 0.35
DEFAULT_WATERMARK_TEXT = "Made with Deckwright"

# centered on the page; rotated bounds stay inside the safe area
_CENTER = (5.0, 2.8125)
_TEXT_BOX = (6.0, 1.2)
_IMAGE_MAX = (4.0, 2.0)


class WatermarkAsset(ABC):
    """Something that can stamp a slide."""

    @abstractmethod
    def apply(self, slide: "Slide", ctx: "RenderContext") -> None:
        pass


@dataclass(frozen=True)
class TextWatermark(WatermarkAsset):
    text: str = DEFAULT_WATERMARK_TEXT

    def apply(self, slide: "Slide", ctx: "RenderContext") -> None:
        theme = ctx.theme
        rect = Rect.centered(*_CENTER, *_TEXT_BOX)
        box = add_text(
            slide,
            rect,
            self.text,
            font=theme.fonts.primary,
            size=40,
            color=theme.colors.muted,
            bold=True,
            align=PP_ALIGN.CENTER,
            anchor=MSO_ANCHOR.MIDDLE,
            rotation=WATERMARK_ROTATION,
            name=WATERMARK_NAME,
        )
        set_text_alpha(box, WATERMARK_OPACITY)


@dataclass(frozen=True)
class ImageWatermark(WatermarkAsset):
    """Logo overlay; ``blob`` is any image format python-pptx accepts."""

    blob: bytes

    def fitted_size(self) -> Tuple[float, float]:
        width_px, height_px = PptxImage.from_blob(self.blob).size
        max_w, max_h = _IMAGE_MAX
        scale = min(max_w / width_px, max_h / height_px)
        return width_px * scale, height_px * scale

    def apply(self, slide: "Slide", ctx: "RenderContext") -> None:
        w, h = self.fitted_size()
        rect = Rect.centered(*_CENTER, w, h)
        check_placement(rect, WATERMARK_ROTATION, WATERMARK_NAME)
        picture = slide.shapes.add_picture(
            io.BytesIO(self.blob),
            Inches(rect.x),
            Inches(rect.y),
            Inches(rect.w),
            Inches(rect.h),
        )
        picture.rotation = WATERMARK_ROTATION
        picture.name = WATERMARK_NAME
        set_picture_alpha(picture, WATERMARK_OPACITY)


def resolve_watermark(
    tier: "Tier | str",
    image: Optional[bytes] = None,
    text: str = DEFAULT_WATERMARK_TEXT,
) -> Optional[WatermarkAsset]:
    """Pick the overlay for a render. Only the free tier is watermarked."""
    if not Tier.parse(tier).is_watermarked():
        return None
    if image:
        return ImageWatermark(image)
    return TextWatermark(text)


def apply_watermark(slide: "Slide", ctx: "RenderContext") -> None:
    """Stamp the slide; must run after every other shape is placed."""
    if ctx.watermark is not None:
        ctx.watermark.apply(slide, ctx)
