"""Plausible placeholder data for when every live source has failed."""
from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from .classification import CONDITIONS
from .models import (
    CHAIN_ROUTES,
    CHAIN_STATUSES,
    ROUTE_DESCRIPTIONS,
    AvalancheAdvisory,
    ChainControlStatus,
    DailyForecast,
    DailySnow,
    WeatherSnapshot,
)

WEATHER_DESCRIPTIONS = ("Sunny", "Partly Cloudy", "Snow", "Overcast")
MOCK_AVALANCHE_TEXT = (
    "Current conditions require careful route finding and conservative terrain choices."
)
MOCK_AVALANCHE_PROBLEMS = ("Wind Slab", "Storm Slab")


class MockSynthesizer:
    """Builds always-valid canonical models from bounded random values.

    Pass a seeded :class:`random.Random` for reproducible output and a
    ``today`` and ``clock`` callables to pin the dates and timestamps.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        today: Optional[Callable[[], date]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self._today = today or date.today
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _between(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def historical_snow(self, days: int = 7) -> Tuple[DailySnow, ...]:
        today = self._today()
        return tuple(
            DailySnow(date=today - timedelta(days=days - 1 - offset), snow_cm=self._between(0, 19))
            for offset in range(days)
        )

    def forecast(self, days: int = 5) -> Tuple[DailyForecast, ...]:
        today = self._today()
        return tuple(
            DailyForecast(
                date=today + timedelta(days=offset),
                temp_high_c=self._between(-5, 9),
                temp_low_c=self._between(-15, -1),
                freshsnow_cm=self._between(0, 9),
                wind_speed_mph=self._between(5, 34),
                condition=self.rng.choice(CONDITIONS),
            )
            for offset in range(days)
        )

    def weather(self) -> WeatherSnapshot:
        return WeatherSnapshot(
            base_depth_cm=self._between(20, 119),
            summit_depth_cm=self._between(50, 199),
            freshsnow_cm=self._between(0, 14),
            description=self.rng.choice(WEATHER_DESCRIPTIONS),
            temp_c=self._between(-10, 9),
            wind_speed_mph=self._between(5, 29),
            forecast=self.forecast(),
            historical=self.historical_snow(),
        )

    def avalanche(self) -> AvalancheAdvisory:
        problem_count = self._between(1, 2)
        return AvalancheAdvisory(
            danger_level=self._between(1, 5),
            text=MOCK_AVALANCHE_TEXT,
            problems=MOCK_AVALANCHE_PROBLEMS[:problem_count],
            last_updated=self._clock(),
        )

    def chain_controls(self) -> List[ChainControlStatus]:
        now = self._clock()
        return [
            ChainControlStatus(
                route=route,
                status=self.rng.choice(CHAIN_STATUSES),
                description=ROUTE_DESCRIPTIONS[route],
                last_updated=now,
            )
            for route in CHAIN_ROUTES
        ]
