"""Per-render state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from deckwright.domain.themes import Theme
from deckwright.domain.value_objects.tier import Tier

if TYPE_CHECKING:
    from deckwright.infra.rendering.watermark import WatermarkAsset


@dataclass
class RenderContext:
    """
    Everything a layout routine may consult besides the slide itself.

    Built once at the start of a render and threaded through every routine;
    only ``slide_index`` changes while the document is composed. Never shared
    between renders.
    """

    theme: Theme
    tier: Tier
    watermark: Optional["WatermarkAsset"] = None
    slide_index: int = 0

    def advance(self) -> int:
        self.slide_index += 1
        return self.slide_index
