"""Secondary weather source: WeatherUnlocked's paid resort forecast API."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from ..config import Credentials
from ..errors import ConfigurationError
from ..http_client import HttpFetcher
from ..logging import get_logger
from ..models import ResortLocation
from .base import SourceAdapter, optional_number, require_list, require_mapping

logger = get_logger(__name__)

SOURCE_ID = "weather_unlocked"


@dataclass(frozen=True)
class WeatherUnlockedDay:
    date: str
    temp_max_c: Optional[float]
    temp_min_c: Optional[float]
    freshsnow_cm: Optional[float]
    wind_speed_mph: Optional[float]
    weather_desc: Optional[str]


@dataclass(frozen=True)
class WeatherUnlockedForecast:
    base_depth: Optional[float]
    upper_depth: Optional[float]
    freshsnow_cm: Optional[float]
    weather_desc: Optional[str]
    temp_c: Optional[float]
    wind_speed_mph: Optional[float]
    days: List[WeatherUnlockedDay]


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_day(entry: Any, index: int) -> WeatherUnlockedDay:
    day: Mapping[str, Any] = require_mapping(entry, f"forecast[{index}]")
    return WeatherUnlockedDay(
        date=str(day.get("date") or ""),
        temp_max_c=optional_number(day.get("temp_max_c"), "temp_max_c"),
        temp_min_c=optional_number(day.get("temp_min_c"), "temp_min_c"),
        freshsnow_cm=optional_number(day.get("freshsnow_cm"), "freshsnow_cm"),
        wind_speed_mph=optional_number(day.get("wind_speed_mph"), "wind_speed_mph"),
        weather_desc=_optional_text(day.get("weather_desc")),
    )


def parse_forecast(data: object) -> WeatherUnlockedForecast:
    body = require_mapping(data, "response")
    entries = require_list(body.get("forecast", []), "forecast")
    return WeatherUnlockedForecast(
        base_depth=optional_number(body.get("base_depth"), "base_depth"),
        upper_depth=optional_number(body.get("upper_depth"), "upper_depth"),
        freshsnow_cm=optional_number(body.get("freshsnow_cm"), "freshsnow_cm"),
        weather_desc=_optional_text(body.get("weather_desc")),
        temp_c=optional_number(body.get("temp_c"), "temp_c"),
        wind_speed_mph=optional_number(body.get("wind_speed_mph"), "wind_speed_mph"),
        days=[_parse_day(entry, index) for index, entry in enumerate(entries)],
    )


class WeatherUnlockedAdapter(SourceAdapter[WeatherUnlockedForecast]):
    name = SOURCE_ID

    def __init__(self, fetcher: HttpFetcher, url: str, *, credentials: Credentials) -> None:
        super().__init__(fetcher, url)
        self.credentials = credentials

    async def fetch(self, params: ResortLocation) -> WeatherUnlockedForecast:
        # Placeholder keys would only earn an auth/CORS failure upstream.
        if not self.credentials.is_real:
            logger.info("source.skipped", source=self.name, resort_id=params.id, reason="placeholder credentials")
            raise ConfigurationError("No real WeatherUnlocked API keys configured")

        url = f"{self.url.rstrip('/')}/{params.id}"
        data = await self.fetcher.fetch_json(
            url,
            params={"app_id": self.credentials.app_id, "app_key": self.credentials.app_key},
        )
        return parse_forecast(data)
