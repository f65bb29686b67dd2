from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Literal, Tuple

from .classification import CONDITIONS, Condition

ChainStatus = Literal["None", "Advised", "Required", "Prohibited"]

CHAIN_STATUSES: Tuple[ChainStatus, ...] = ("None", "Advised", "Required", "Prohibited")

AVALANCHE_PROBLEMS: Tuple[str, ...] = (
    "Wind Slab",
    "Storm Slab",
    "Persistent Slab",
    "Deep Persistent Slab",
    "Wet Avalanche",
    "Cornice Fall",
    "Loose Snow",
)
MAX_AVALANCHE_PROBLEMS = 3

ROUTE_DESCRIPTIONS: Dict[str, str] = {
    "I-80": "Sacramento to Truckee",
    "US-50": "Sacramento to South Lake Tahoe",
    "SR-89": "Truckee to South Lake Tahoe",
}
CHAIN_ROUTES: Tuple[str, ...] = tuple(ROUTE_DESCRIPTIONS)


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value!r}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ResortLocation:
    """Opaque resort registry entry; ``id`` doubles as the premium provider id."""

    id: str
    latitude: float
    longitude: float
    name: str = ""


@dataclass(frozen=True)
class DailyForecast:
    date: date
    temp_high_c: int
    temp_low_c: int
    freshsnow_cm: int
    wind_speed_mph: int
    condition: Condition

    def __post_init__(self) -> None:
        _require_non_negative("freshsnow_cm", self.freshsnow_cm)
        _require_non_negative("wind_speed_mph", self.wind_speed_mph)
        if self.condition not in CONDITIONS:
            raise ValueError(f"Unknown condition: {self.condition!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "temp_high_c": self.temp_high_c,
            "temp_low_c": self.temp_low_c,
            "freshsnow_cm": self.freshsnow_cm,
            "wind_speed_mph": self.wind_speed_mph,
            "condition": self.condition,
        }


@dataclass(frozen=True)
class DailySnow:
    date: date
    snow_cm: int

    def __post_init__(self) -> None:
        _require_non_negative("snow_cm", self.snow_cm)

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "snow_cm": self.snow_cm}


@dataclass(frozen=True)
class WeatherSnapshot:
    """Canonical weather card data for one resort.

    Depths are centimetres and temperatures Celsius, rounded to whole units.
    ``forecast`` holds at most five days starting today and ``historical`` at
    most seven days, both in ascending date order.
    """

    base_depth_cm: int
    summit_depth_cm: int
    freshsnow_cm: int
    description: str
    temp_c: int
    wind_speed_mph: int
    forecast: Tuple[DailyForecast, ...] = ()
    historical: Tuple[DailySnow, ...] = ()

    def __post_init__(self) -> None:
        _require_non_negative("base_depth_cm", self.base_depth_cm)
        _require_non_negative("summit_depth_cm", self.summit_depth_cm)
        _require_non_negative("freshsnow_cm", self.freshsnow_cm)
        _require_non_negative("wind_speed_mph", self.wind_speed_mph)
        if len(self.forecast) > 5:
            raise ValueError("forecast holds at most 5 days")
        if len(self.historical) > 7:
            raise ValueError("historical holds at most 7 days")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_depth_cm": self.base_depth_cm,
            "summit_depth_cm": self.summit_depth_cm,
            "freshsnow_cm": self.freshsnow_cm,
            "description": self.description,
            "temp_c": self.temp_c,
            "wind_speed_mph": self.wind_speed_mph,
            "forecast": [day.to_dict() for day in self.forecast],
            "historical": [day.to_dict() for day in self.historical],
        }


@dataclass(frozen=True)
class AvalancheAdvisory:
    danger_level: int
    text: str
    problems: Tuple[str, ...] = ()
    last_updated: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if isinstance(self.danger_level, bool) or not isinstance(self.danger_level, int):
            raise ValueError(f"danger_level must be an integer, got {self.danger_level!r}")
        if not 1 <= self.danger_level <= 5:
            raise ValueError(f"danger_level must be within 1..5, got {self.danger_level}")
        if len(self.problems) > MAX_AVALANCHE_PROBLEMS:
            raise ValueError(f"At most {MAX_AVALANCHE_PROBLEMS} avalanche problems are reported")
        if len(set(self.problems)) != len(self.problems):
            raise ValueError("Avalanche problems must be distinct")
        unknown = [problem for problem in self.problems if problem not in AVALANCHE_PROBLEMS]
        if unknown:
            raise ValueError(f"Unknown avalanche problems: {unknown}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "danger_level": self.danger_level,
            "text": self.text,
            "problems": list(self.problems),
            "last_updated": self.last_updated.isoformat(),
        }


@dataclass(frozen=True)
class ChainControlStatus:
    route: str
    status: ChainStatus
    description: str
    last_updated: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if self.route not in ROUTE_DESCRIPTIONS:
            raise ValueError(f"Unknown route: {self.route!r}")
        if self.status not in CHAIN_STATUSES:
            raise ValueError(f"Unknown chain control status: {self.status!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route": self.route,
            "status": self.status,
            "description": self.description,
            "last_updated": self.last_updated.isoformat(),
        }
