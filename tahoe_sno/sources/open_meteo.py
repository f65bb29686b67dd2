"""Primary weather source: the free Open-Meteo forecast API."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..http_client import HttpFetcher
from ..models import ResortLocation
from .base import SourceAdapter, number_series, require_list, require_mapping

SOURCE_ID = "open_meteo"

DAILY_FIELDS = ("temperature_2m_max", "temperature_2m_min", "snowfall_sum")
HOURLY_FIELDS = ("temperature_2m", "snow_depth")
FORECAST_DAYS = 5
PAST_DAYS = 7


@dataclass(frozen=True)
class OpenMeteoForecast:
    """Daily and hourly arrays as Open-Meteo returns them, nulls preserved."""

    daily_time: List[str]
    temperature_max: List[Optional[float]]
    temperature_min: List[Optional[float]]
    snowfall_sum: List[Optional[float]]
    hourly_time: List[str]
    hourly_temperature: List[Optional[float]]
    hourly_snow_depth: List[Optional[float]]


def parse_forecast(data: object) -> OpenMeteoForecast:
    body = require_mapping(data, "response")
    daily = require_mapping(body.get("daily"), "daily")
    hourly = require_mapping(body.get("hourly"), "hourly")

    daily_time = [str(value) for value in require_list(daily.get("time"), "daily.time")]
    hourly_time = [str(value) for value in require_list(hourly.get("time"), "hourly.time")]

    return OpenMeteoForecast(
        daily_time=daily_time,
        temperature_max=number_series(daily, "temperature_2m_max", len(daily_time), "daily"),
        temperature_min=number_series(daily, "temperature_2m_min", len(daily_time), "daily"),
        snowfall_sum=number_series(daily, "snowfall_sum", len(daily_time), "daily"),
        hourly_time=hourly_time,
        hourly_temperature=number_series(hourly, "temperature_2m", len(hourly_time), "hourly"),
        hourly_snow_depth=number_series(hourly, "snow_depth", len(hourly_time), "hourly"),
    )


class OpenMeteoAdapter(SourceAdapter[OpenMeteoForecast]):
    name = SOURCE_ID

    def __init__(self, fetcher: HttpFetcher, url: str, *, timezone: str = "America/Los_Angeles") -> None:
        super().__init__(fetcher, url)
        self.timezone = timezone

    def request_params(self, resort: ResortLocation) -> dict:
        return {
            "latitude": resort.latitude,
            "longitude": resort.longitude,
            "daily": ",".join(DAILY_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "timezone": self.timezone,
            "forecast_days": FORECAST_DAYS,
            "past_days": PAST_DAYS,
        }

    async def fetch(self, params: ResortLocation) -> OpenMeteoForecast:
        data = await self.fetcher.fetch_json(self.url, params=self.request_params(params))
        return parse_forecast(data)
