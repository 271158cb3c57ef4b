from .tier import ActionKind, Tier, TIER_THEMES

__all__ = ["ActionKind", "Tier", "TIER_THEMES"]
