
"""
Value objects shared by the MCP servers, the orchestrator and the GUI.

These are plain request/response records with a single-request lifetime:
a color palette, a generated screen and the result of one generation batch.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional


class DesignStyle(str, Enum):
    """Visual styles the user can pick for the generated app."""

    MINIMAL = "Minimal"
    MATERIAL = "Material UI"
    IOS = "iOS Style"
    DARK = "Dark Mode"
    MODERN = "Modern Flat"
    NEUMORPHIC = "Neumorphic"

    @classmethod
    def from_label(cls, label: str) -> "DesignStyle":
        for style in cls:
            if style.value == label or style.name == label:
                return style
        raise ValueError(f"Unknown design style: {label!r}")


@dataclass(frozen=True)
class ColorPalette:
    primary: str
    secondary: str
    accent: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


DEFAULT_BASE_COLOR = "#A78BFA"
DEFAULT_PALETTE = ColorPalette(primary="#A78BFA", secondary="#2DD4BF", accent="#F59E0B")


@dataclass
class ScreenCode:
    react: str
    flutter: str


@dataclass
class GeneratedScreen:
    """One generated app page: its mockup image and two code renderings."""

    title: str
    image_url: str
    code: ScreenCode


@dataclass
class GenerateAppScreensResult:
    """
    Outcome of one batch.

    Successful screens keep the order in which screen names were extracted;
    every failed screen contributes exactly one human-readable reason.
    """

    successful_screens: List[GeneratedScreen] = field(default_factory=list)
    failed_screen_reasons: List[str] = field(default_factory=list)


@dataclass
class MockupResult:
    screens: GenerateAppScreensResult
    logo_url: Optional[str] = None
