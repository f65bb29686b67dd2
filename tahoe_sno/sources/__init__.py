"""Upstream source adapters, one per provider."""
from __future__ import annotations

from typing import Dict

import httpx

from ..config import AVALANCHE, CHAIN_CONTROL, OPEN_METEO, WEATHER_UNLOCKED, ClientConfig
from ..http_client import HttpFetcher
from ..logging import get_logger
from .avalanche import AvalancheAdapter, AvalancheFeed
from .base import SourceAdapter
from .caltrans import ChainControlAdapter, ChainControlLayer
from .open_meteo import OpenMeteoAdapter, OpenMeteoForecast
from .weather_unlocked import WeatherUnlockedAdapter, WeatherUnlockedForecast

logger = get_logger(__name__)


def build_adapters(config: ClientConfig, client: httpx.AsyncClient) -> Dict[str, SourceAdapter]:
    """Instantiate the adapters enabled in ``config``, keyed by source id."""
    adapters: Dict[str, SourceAdapter] = {}
    if config.is_enabled(OPEN_METEO):
        adapters[OPEN_METEO] = OpenMeteoAdapter(
            HttpFetcher(client, source=OPEN_METEO),
            config.url_for(OPEN_METEO),
            timezone=config.timezone,
        )
    if config.is_enabled(WEATHER_UNLOCKED):
        adapters[WEATHER_UNLOCKED] = WeatherUnlockedAdapter(
            HttpFetcher(client, source=WEATHER_UNLOCKED),
            config.url_for(WEATHER_UNLOCKED),
            credentials=config.weather_unlocked,
        )
    if config.is_enabled(AVALANCHE):
        adapters[AVALANCHE] = AvalancheAdapter(
            HttpFetcher(client, source=AVALANCHE),
            config.url_for(AVALANCHE),
        )
    if config.is_enabled(CHAIN_CONTROL):
        adapters[CHAIN_CONTROL] = ChainControlAdapter(
            HttpFetcher(client, source=CHAIN_CONTROL),
            config.url_for(CHAIN_CONTROL),
        )
    logger.info("sources.configured", sources=sorted(adapters))
    return adapters


__all__ = [
    "AvalancheAdapter",
    "AvalancheFeed",
    "ChainControlAdapter",
    "ChainControlLayer",
    "OpenMeteoAdapter",
    "OpenMeteoForecast",
    "SourceAdapter",
    "WeatherUnlockedAdapter",
    "WeatherUnlockedForecast",
    "build_adapters",
]
