"""Presentation rendering package (python-pptx)."""

from .geometry import SAFE_AREA, Rect, rotated_bounds, shape_bounds
from .layouts import dispatch_layout
from .packaging import (
    PPTX_MEDIA_TYPE,
    DocumentMetadata,
    ExportedDeck,
    deck_filename,
    export_deck,
    slugify,
)
from .renderer import render
from .watermark import (
    WATERMARK_NAME,
    ImageWatermark,
    TextWatermark,
    WatermarkAsset,
    resolve_watermark,
)

__all__ = [
    "DocumentMetadata",
    "ExportedDeck",
    "ImageWatermark",
    "PPTX_MEDIA_TYPE",
    "Rect",
    "SAFE_AREA",
    "TextWatermark",
    "WATERMARK_NAME",
    "WatermarkAsset",
    "deck_filename",
    "dispatch_layout",
    "export_deck",
    "render",
    "resolve_watermark",
    "rotated_bounds",
    "shape_bounds",
    "slugify",
]
