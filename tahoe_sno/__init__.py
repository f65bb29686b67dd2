"""Aggregates Tahoe weather, avalanche and chain control feeds."""

from .client import ConditionsClient, FallbackCoordinator
from .config import ClientConfig, load_config
from .errors import (
    ConfigurationError,
    NetworkError,
    ParseError,
    SourceUnavailableError,
    TahoeSnoError,
    UpstreamStatusError,
)
from .models import (
    AvalancheAdvisory,
    ChainControlStatus,
    DailyForecast,
    DailySnow,
    ResortLocation,
    WeatherSnapshot,
)

__all__ = [
    "AvalancheAdvisory",
    "ChainControlStatus",
    "ClientConfig",
    "ConditionsClient",
    "ConfigurationError",
    "DailyForecast",
    "DailySnow",
    "FallbackCoordinator",
    "NetworkError",
    "ParseError",
    "ResortLocation",
    "SourceUnavailableError",
    "TahoeSnoError",
    "UpstreamStatusError",
    "WeatherSnapshot",
    "load_config",
]
