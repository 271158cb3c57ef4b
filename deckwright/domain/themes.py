"""
Theme catalog.

Static, read-only registry of visual configurations plus the tier gate. Themes
are never mutated; a render receives the chosen ``Theme`` explicitly.
"""

import random
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional

from deckwright.domain.value_objects.tier import TIER_THEMES, Tier

DEFAULT_THEME_KEY = "minimal"

SPACING_POINTS = {"tight": 4, "standard": 8, "comfortable": 10, "generous": 14}
WEIGHT_POINTS = {"light": 1.0, "medium": 2.0, "heavy": 3.0, "bold": 4.0}


@dataclass(frozen=True)
class ThemeFonts:
    primary: str
    secondary: str
    accent: str


@dataclass(frozen=True)
class ThemeSizes:
    title: int
    h2: int
    bullet: int
    caption: int


@dataclass(frozen=True)
class ThemeColors:
    """Hex RGB strings without the leading ``#``."""

    primary: str
    secondary: str
    accent: str
    background: str
    text: str
    muted: str


@dataclass(frozen=True)
class ThemeDesign:
    use_shadows: bool
    use_gradients: bool
    use_decorative_elements: bool
    corner_radius: int
    spacing: str
    visual_weight: str

    @property
    def paragraph_spacing_pt(self) -> int:
        return SPACING_POINTS.get(self.spacing, SPACING_POINTS["standard"])

    @property
    def line_weight_pt(self) -> float:
        return WEIGHT_POINTS.get(self.visual_weight, WEIGHT_POINTS["medium"])


@dataclass(frozen=True)
class Theme:
    key: str
    name: str
    fonts: ThemeFonts
    sizes: ThemeSizes
    colors: ThemeColors
    design: ThemeDesign


def _theme(key, name, fonts, sizes, colors, design) -> Theme:
    return Theme(
        key=key,
        name=name,
        fonts=ThemeFonts(*fonts),
        sizes=ThemeSizes(*sizes),
        colors=ThemeColors(*colors),
        design=ThemeDesign(*design),
    )


THEMES: Mapping[str, Theme] = MappingProxyType(
    {
        "minimal": _theme(
            "minimal", "Minimal",
            ("Inter", "Inter", "Inter"),
            (44, 32, 20, 14),
            ("000000", "333333", "666666", "FFFFFF", "000000", "666666"),
            (False, False, False, 0, "tight", "light"),
        ),
        "modern": _theme(
            "modern", "Modern",
            ("Inter", "Inter", "Inter"),
            (46, 34, 22, 16),
            ("2563EB", "1E40AF", "3B82F6", "FFFFFF", "1F2937", "6B7280"),
            (True, True, True, 8, "comfortable", "medium"),
        ),
        "corporate": _theme(
            "corporate", "Corporate",
            ("Arial", "Arial", "Arial"),
            (42, 30, 20, 14),
            ("1F2937", "374151", "4B5563", "FFFFFF", "1F2937", "6B7280"),
            (False, False, False, 0, "standard", "heavy"),
        ),
        "colorful": _theme(
            "colorful", "Colorful",
            ("Inter", "Inter", "Inter"),
            (48, 36, 24, 16),
            ("FF6B6B", "4ECDC4", "45B7D1", "FFFFFF", "2C3E50", "7F8C8D"),
            (True, True, True, 12, "generous", "medium"),
        ),
        "creative": _theme(
            "creative", "Creative",
            ("Inter", "Inter", "Inter"),
            (50, 38, 26, 18),
            ("8B5CF6", "A855F7", "C084FC", "FFFFFF", "1F2937", "6B7280"),
            (True, True, True, 16, "generous", "bold"),
        ),
        "cosmic": _theme(
            "cosmic", "Cosmic Dreams",
            ("Impact", "Arial Black", "Comic Sans MS"),
            (48, 36, 24, 16),
            ("FF6B6B", "4ECDC4", "45B7D1", "1A1A2E", "FFFFFF", "B0B0B0"),
            (True, True, True, 20, "generous", "bold"),
        ),
        "neon": _theme(
            "neon", "Neon Cyberpunk",
            ("Orbitron", "Exo 2", "Rajdhani"),
            (52, 38, 26, 18),
            ("00FFFF", "FF00FF", "00FF00", "000000", "FFFFFF", "888888"),
            (True, True, True, 0, "tight", "bold"),
        ),
        "sunset": _theme(
            "sunset", "Sunset Vibes",
            ("Montserrat", "Open Sans", "Dancing Script"),
            (46, 32, 22, 16),
            ("FF6B35", "F7931E", "FFD23F", "FFF8E1", "2C3E50", "7F8C8D"),
            (True, True, True, 10, "comfortable", "medium"),
        ),
    }
)


class ThemeCatalog:
    """Pure lookups over the theme registry and the tier gate."""

    def __init__(
        self,
        themes: Mapping[str, Theme],
        tier_themes: Mapping[Tier, FrozenSet[str]],
        default_key: str = DEFAULT_THEME_KEY,
    ):
        if default_key not in themes:
            raise ValueError(f"Default theme '{default_key}' is not in the catalog")
        self._themes = themes
        self._tier_themes = tier_themes
        self._default_key = default_key

    @property
    def default(self) -> Theme:
        return self._themes[self._default_key]

    def keys(self) -> List[str]:
        return list(self._themes)

    def get(self, key: Optional[str]) -> Theme:
        """Theme for ``key``; unknown or missing keys get the default theme."""
        if not key:
            return self.default
        return self._themes.get(key.strip().lower(), self.default)

    def random(self, rng: Optional[random.Random] = None) -> Theme:
        chooser = rng or random
        return self._themes[chooser.choice(self.keys())]

    def is_available(self, key: str, tier: "Tier | str") -> bool:
        allowed = self._tier_themes.get(Tier.parse(tier), frozenset())
        return key in allowed and key in self._themes

    def available_for(self, tier: "Tier | str") -> List[str]:
        return [key for key in self._themes if self.is_available(key, tier)]

    def describe(self, tier: "Tier | str") -> List[Dict[str, object]]:
        """Catalog listing for API consumers."""
        return [
            {
                "key": theme.key,
                "name": theme.name,
                "available": self.is_available(theme.key, tier),
                "colors": {
                    "primary": theme.colors.primary,
                    "background": theme.colors.background,
                    "text": theme.colors.text,
                },
            }
            for theme in self._themes.values()
        ]


theme_catalog = ThemeCatalog(THEMES, TIER_THEMES)
