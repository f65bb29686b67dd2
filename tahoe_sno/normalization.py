from __future__ import annotations

import math
import random
import re
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from . import units
from .classification import classify_numeric, classify_text
from .errors import ParseError
from .models import (
    AVALANCHE_PROBLEMS,
    CHAIN_ROUTES,
    MAX_AVALANCHE_PROBLEMS,
    ROUTE_DESCRIPTIONS,
    AvalancheAdvisory,
    ChainControlStatus,
    ChainStatus,
    DailyForecast,
    DailySnow,
    WeatherSnapshot,
)
from .sources.avalanche import AvalancheFeed
from .sources.caltrans import ChainControlLayer
from .sources.open_meteo import OpenMeteoForecast
from .sources.weather_unlocked import WeatherUnlockedForecast
from .synthetic import MockSynthesizer

FORECAST_DAYS = 5
HISTORICAL_DAYS = 7
# Open-Meteo's forecast endpoint has no wind in the requested fields.
OPEN_METEO_WIND_SPEED_MPH = 15
# Upper mountain depth is estimated as 1.5x the grid-cell depth.
SUMMIT_DEPTH_FACTOR = 1.5
DEFAULT_DANGER_LEVEL = 2
ADVISORY_TEXT_LIMIT = 200
UNKNOWN = "Unknown"

_DANGER_PATTERN = re.compile(r"danger level (\d)", re.IGNORECASE)


def round_half_up(value: Optional[float]) -> int:
    if value is None:
        return 0
    return int(math.floor(value + 0.5))


def _non_negative(value: Optional[float]) -> int:
    return max(0, round_half_up(value))


def parse_date(text: str) -> date:
    """Accept ``YYYY-MM-DD`` (ISO) or ``DD/MM/YYYY`` provider dates."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d/%m/%Y").date()
    except ValueError as exc:
        raise ParseError(f"Unrecognised date: {text!r}") from exc


def window_start(dates: Sequence[date], today: date, size: int) -> int:
    """Index where a ``size``-day window beginning today starts.

    Falls back to the first entry when today is absent and never lets the
    window run past the end of the series.
    """
    try:
        start = list(dates).index(today)
    except ValueError:
        start = 0
    return max(0, min(start, len(dates) - size))


def historical_slice(length: int, size: int = HISTORICAL_DAYS) -> slice:
    return slice(length - min(size, length), length)


def current_hour_index(hourly_time: Sequence[str], now: datetime) -> Optional[int]:
    """First hourly entry whose hour-of-day matches ``now``.

    Only the hour is compared, not the date, so with past days in the series
    this picks the oldest day that has the hour.
    """
    for index, stamp in enumerate(hourly_time):
        try:
            hour = datetime.fromisoformat(stamp).hour
        except ValueError as exc:
            raise ParseError(f"Unrecognised hourly timestamp: {stamp!r}") from exc
        if hour == now.hour:
            return index
    return None


def _at(values: Sequence[Optional[float]], index: Optional[int]) -> Optional[float]:
    if index is None or index >= len(values):
        return None
    return values[index]


def map_chain_status(status: Optional[str]) -> ChainStatus:
    lowered = (status or "unknown").lower()
    if "required" in lowered:
        return "Required"
    if "advised" in lowered:
        return "Advised"
    if "prohibited" in lowered:
        return "Prohibited"
    return "None"


def extract_problems(text: str) -> Tuple[str, ...]:
    lowered = text.lower()
    found = [problem for problem in AVALANCHE_PROBLEMS if problem.lower() in lowered]
    return tuple(found[:MAX_AVALANCHE_PROBLEMS])


class Normalizer:
    """Maps provider payloads onto the canonical models.

    ``clock`` returns the current UTC time; it is converted into the resort
    timezone for "today" and current-hour alignment.
    """

    def __init__(
        self,
        timezone_name: str = "America/Los_Angeles",
        *,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
        synthesizer: Optional[MockSynthesizer] = None,
    ) -> None:
        self.zone = ZoneInfo(timezone_name)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.rng = rng
        self.synthesizer = synthesizer or MockSynthesizer(rng, today=self.today, clock=self._clock)

    def local_now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.zone)

    def today(self) -> date:
        return self.local_now().date()

    def open_meteo(self, raw: OpenMeteoForecast) -> WeatherSnapshot:
        now = self.local_now()
        dates = [parse_date(stamp) for stamp in raw.daily_time]
        size = min(FORECAST_DAYS, len(dates))
        start = window_start(dates, now.date(), size)

        forecast: List[DailyForecast] = []
        for index in range(start, start + size):
            snowfall = raw.snowfall_sum[index] or 0.0
            forecast.append(
                DailyForecast(
                    date=dates[index],
                    temp_high_c=round_half_up(raw.temperature_max[index]),
                    temp_low_c=round_half_up(raw.temperature_min[index]),
                    freshsnow_cm=_non_negative(units.daily_snowfall_to_cm(snowfall)),
                    wind_speed_mph=OPEN_METEO_WIND_SPEED_MPH,
                    condition=classify_numeric(snowfall, self.rng),
                )
            )

        historical = tuple(
            DailySnow(
                date=dates[index],
                snow_cm=_non_negative(units.daily_snowfall_to_cm(raw.snowfall_sum[index] or 0.0)),
            )
            for index in range(len(dates))[historical_slice(len(dates))]
        )

        hour_index = current_hour_index(raw.hourly_time, now)
        depth_m = _at(raw.hourly_snow_depth, hour_index) or 0.0
        today_snowfall = raw.snowfall_sum[start] if size else None

        return WeatherSnapshot(
            base_depth_cm=_non_negative(units.meters_to_cm(depth_m)),
            summit_depth_cm=_non_negative(units.meters_to_cm(depth_m) * SUMMIT_DEPTH_FACTOR),
            freshsnow_cm=_non_negative(units.daily_snowfall_to_cm(today_snowfall or 0.0)),
            description=forecast[0].condition if forecast else UNKNOWN,
            temp_c=round_half_up(_at(raw.hourly_temperature, hour_index)),
            wind_speed_mph=OPEN_METEO_WIND_SPEED_MPH,
            forecast=tuple(forecast),
            historical=historical,
        )

    def weather_unlocked(self, raw: WeatherUnlockedForecast) -> WeatherSnapshot:
        forecast = tuple(
            DailyForecast(
                date=parse_date(day.date),
                temp_high_c=round_half_up(day.temp_max_c),
                temp_low_c=round_half_up(day.temp_min_c),
                freshsnow_cm=_non_negative(day.freshsnow_cm),
                wind_speed_mph=_non_negative(day.wind_speed_mph),
                condition=classify_text(day.weather_desc),
            )
            for day in raw.days[:FORECAST_DAYS]
        )
        return WeatherSnapshot(
            base_depth_cm=_non_negative(raw.base_depth),
            summit_depth_cm=_non_negative(raw.upper_depth),
            freshsnow_cm=_non_negative(raw.freshsnow_cm),
            description=raw.weather_desc or UNKNOWN,
            temp_c=round_half_up(raw.temp_c),
            wind_speed_mph=_non_negative(raw.wind_speed_mph),
            forecast=forecast,
            # The provider publishes no history.
            historical=self.synthesizer.historical_snow(HISTORICAL_DAYS),
        )

    def avalanche(self, raw: AvalancheFeed) -> AvalancheAdvisory:
        match = _DANGER_PATTERN.search(raw.description)
        level = int(match.group(1)) if match else DEFAULT_DANGER_LEVEL
        return AvalancheAdvisory(
            danger_level=min(5, max(1, level)),
            text=raw.description[:ADVISORY_TEXT_LIMIT] + "...",
            problems=extract_problems(raw.description),
            last_updated=self._clock(),
        )

    def chain_controls(self, layers: Sequence[ChainControlLayer]) -> List[ChainControlStatus]:
        now = self._clock()
        statuses = []
        for route in CHAIN_ROUTES:
            layer = next(
                (item for item in layers if route in item.name or route in item.description),
                None,
            )
            statuses.append(
                ChainControlStatus(
                    route=route,
                    status=map_chain_status(layer.status if layer else None),
                    description=ROUTE_DESCRIPTIONS[route],
                    last_updated=now,
                )
            )
        return statuses
