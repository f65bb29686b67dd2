"""Map upstream weather signals onto the closed set of forecast conditions."""
from __future__ import annotations

import random
from typing import Literal, Optional, Tuple

Condition = Literal["sunny", "partly-cloudy", "cloudy", "snow", "rain"]

CONDITIONS: Tuple[Condition, ...] = ("sunny", "partly-cloudy", "cloudy", "snow", "rain")

SNOW_THRESHOLD = 1.0
FLURRY_THRESHOLD = 0.1


def classify_text(description: Optional[str]) -> Condition:
    """Classify a provider's human readable description.

    Matching is by substring in priority order, so "rain and snow" is snow.
    """
    desc = (description or "").lower()
    if "snow" in desc:
        return "snow"
    if "rain" in desc:
        return "rain"
    if "sunny" in desc or "clear" in desc:
        return "sunny"
    if "partly" in desc or "scattered" in desc:
        return "partly-cloudy"
    return "cloudy"


def classify_numeric(magnitude: Optional[float], rng: Optional[random.Random] = None) -> Condition:
    """Classify a snowfall magnitude.

    Low readings carry no cloud information, so they pick sunny or cloudy at
    random.
    """
    value = float(magnitude or 0)
    if value > SNOW_THRESHOLD:
        return "snow"
    if value > FLURRY_THRESHOLD:
        return "partly-cloudy"
    chooser = rng or random
    return "sunny" if chooser.random() > 0.5 else "cloudy"
