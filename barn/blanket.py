"""Blanket recommendation from temperature and clip status."""

import math
from enum import Enum


class BlanketTier(Enum):
    """Blanket weights, lightest first."""

    NONE = "No Blanket"
    NONE_OR_LIGHT = "No Blanket / Light Sheet"
    LIGHT_SHEET = "Light Sheet"
    MEDIUM_WEIGHT = "Medium Weight"
    HEAVY_WEIGHT = "Heavy Weight"
    HEAVY_WEIGHT_PLUS = "Heavy Weight + Liner / Neck Cover"


# (lower bound °F, unclipped, clipped); the top row is strictly above 60
_LADDER = [
    (50, BlanketTier.NONE, BlanketTier.LIGHT_SHEET),
    (40, BlanketTier.LIGHT_SHEET, BlanketTier.MEDIUM_WEIGHT),
    (30, BlanketTier.MEDIUM_WEIGHT, BlanketTier.HEAVY_WEIGHT),
]

_DESCRIPTIONS = {
    BlanketTier.NONE: "Your horse is comfortable without a blanket at this temperature.",
    BlanketTier.NONE_OR_LIGHT: "A light sheet is optional. Monitor if the horse seems chilly.",
    BlanketTier.LIGHT_SHEET: "A lightweight turnout sheet will keep your horse comfortable.",
    BlanketTier.MEDIUM_WEIGHT: "A medium-weight blanket (200g fill) is recommended.",
    BlanketTier.HEAVY_WEIGHT: "A heavy-weight blanket (300g+ fill) is needed for warmth.",
    BlanketTier.HEAVY_WEIGHT_PLUS: (
        "Layer up with a heavy blanket, liner and neck cover for extreme cold."
    ),
}


def classify(temperature_f: float, is_clipped: bool) -> BlanketTier:
    """
    Recommend a blanket for the given temperature in Fahrenheit.

    Each bracket includes its lower edge; 60°F itself falls in the 50-60 row.
    """
    if math.isnan(temperature_f):
        raise ValueError("Temperature must be a number")
    if temperature_f > 60:
        return BlanketTier.NONE_OR_LIGHT if is_clipped else BlanketTier.NONE
    for lower, unclipped, clipped in _LADDER:
        if temperature_f >= lower:
            return clipped if is_clipped else unclipped
    return BlanketTier.HEAVY_WEIGHT_PLUS if is_clipped else BlanketTier.HEAVY_WEIGHT


def description(tier: BlanketTier) -> str:
    return _DESCRIPTIONS[tier]
