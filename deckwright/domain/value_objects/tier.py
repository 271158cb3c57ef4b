"""
Subscription tier value object.
"""

from enum import Enum
from typing import Dict, FrozenSet


class Tier(str, Enum):
    """Subscription level; gates theme availability and watermarking."""

    FREE = "free"
    PRO = "pro"
    BUSINESS = "business"
    ENTERPRISE = "enterprise"

    @classmethod
    def parse(cls, value: "str | Tier | None") -> "Tier":
        """Lenient lookup; unknown or missing tiers are treated as free."""
        if isinstance(value, Tier):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.FREE

    def is_watermarked(self) -> bool:
        return self is Tier.FREE


class ActionKind(str, Enum):
    """Metered actions reported to the quota boundary."""

    CREATE_PRESENTATION = "create_presentation"
    REGENERATE_SLIDES = "regenerate_slides"
    EXPORT_PRESENTATION = "export_presentation"


_PAID_THEMES = frozenset({"minimal", "modern", "corporate", "colorful", "creative"})

TIER_THEMES: Dict[Tier, FrozenSet[str]] = {
    Tier.FREE: frozenset({"minimal", "modern"}),
    Tier.PRO: _PAID_THEMES,
    Tier.BUSINESS: _PAID_THEMES,
    Tier.ENTERPRISE: _PAID_THEMES,
}
