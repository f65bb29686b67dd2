from __future__ import annotations

from typing import Dict, Iterable, List

from tahoe_sno.config import AppConfig
from tahoe_sno.models import ResortLocation


def all_resorts(config: AppConfig) -> List[ResortLocation]:
    """Resort locations from the configured registry, in configured order."""
    return [
        ResortLocation(
            id=str(resort.id),
            latitude=float(resort.latitude),
            longitude=float(resort.longitude),
            name=resort.name,
        )
        for resort in config.resorts
    ]


def resort_lookup(resorts: Iterable[ResortLocation]) -> Dict[str, ResortLocation]:
    return {resort.id: resort for resort in resorts}
