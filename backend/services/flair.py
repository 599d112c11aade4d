"""
Flair - turns a fragmentation score into a user badge

Bands:
- stable:      fragmentation < 0.3
- fluctuating: 0.3 <= fragmentation <= 0.7
- chaotic:     fragmentation > 0.7

Colors are configurable (Settings.flair_color_*); the text is always
"Reality Index: {score:.2f}".
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import Settings, get_settings

STABLE_BELOW = 0.3
CHAOTIC_ABOVE = 0.7


class RealityBand(str, Enum):
    STABLE = "stable"
    FLUCTUATING = "fluctuating"
    CHAOTIC = "chaotic"


@dataclass(frozen=True)
class FlairBadge:
    text: str
    background_color: str
    band: RealityBand


def classify(fragmentation: float) -> RealityBand:
    """Map a fragmentation score onto its band"""
    if fragmentation < STABLE_BELOW:
        return RealityBand.STABLE
    if fragmentation <= CHAOTIC_ABOVE:
        return RealityBand.FLUCTUATING
    return RealityBand.CHAOTIC


def format_index(fragmentation: float) -> str:
    return f"{fragmentation:.2f}"


def build_flair(fragmentation: float, settings: Optional[Settings] = None) -> FlairBadge:
    """Badge text and color for a fragmentation score"""
    settings = settings or get_settings()
    band = classify(fragmentation)
    colors = {
        RealityBand.STABLE: settings.flair_color_stable,
        RealityBand.FLUCTUATING: settings.flair_color_fluctuating,
        RealityBand.CHAOTIC: settings.flair_color_chaotic,
    }
    return FlairBadge(
        text=f"Reality Index: {format_index(fragmentation)}",
        background_color=colors[band],
        band=band,
    )
