"""Downstream entry points: one coroutine per data kind.

Each call walks its fallback chain in order, trying one source at a time and
stopping at the first success. When the chain is exhausted the configured
policy decides between raising :class:`SourceUnavailableError` (weather by
default) and returning synthetic data (avalanche and chain control by
default). Concurrent calls share nothing but the HTTP client and config;
overlapping refreshes are neither deduplicated nor cancelled.
"""
from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

import httpx

from .config import (
    AVALANCHE,
    CHAIN_CONTROL,
    OPEN_METEO,
    WEATHER_KIND,
    WEATHER_UNLOCKED,
    ClientConfig,
)
from .errors import ConfigurationError, SourceUnavailableError
from .http_client import build_async_client
from .logging import get_logger, request_context
from .models import AvalancheAdvisory, ChainControlStatus, ResortLocation, WeatherSnapshot
from .normalization import Normalizer
from .sources import SourceAdapter, build_adapters

logger = get_logger(__name__)

T = TypeVar("T")

# Highest priority first.
WEATHER_CHAIN = (WEATHER_UNLOCKED, OPEN_METEO)


class FallbackState(str, enum.Enum):
    ATTEMPTING = "attempting"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class Attempt(Generic[T]):
    source: str
    run: Callable[[], Awaitable[T]]


class FallbackCoordinator:
    """Runs a fallback chain for one data kind."""

    def __init__(self, config: ClientConfig) -> None:
        self.config = config

    async def resolve(
        self,
        kind: str,
        attempts: Sequence[Attempt[T]],
        synthesize: Optional[Callable[[], T]] = None,
    ) -> T:
        last_error: Optional[Exception] = None
        for index, attempt in enumerate(attempts):
            logger.info(
                "fallback.attempt",
                state=FallbackState.ATTEMPTING.value,
                attempt=index,
                source=attempt.source,
            )
            try:
                result = await attempt.run()
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "source.failure",
                    source=attempt.source,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                continue
            logger.info("source.success", state=FallbackState.SUCCESS.value, source=attempt.source)
            return result

        if last_error is None:
            last_error = ConfigurationError(f"No {kind} sources are enabled")

        if synthesize is not None and self.config.masks_failures(kind):
            logger.info("fallback.synthetic", state=FallbackState.EXHAUSTED.value, error=str(last_error))
            return synthesize()

        logger.error("fallback.exhausted", state=FallbackState.EXHAUSTED.value, error=str(last_error))
        raise SourceUnavailableError(kind, last_error) from last_error


class ConditionsClient:
    """Explicitly constructed client for the three canonical data kinds.

    Pass ``http_client`` to share or stub the transport; otherwise one is
    created from the configured timeout and closed by :meth:`aclose`.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._owns_http_client = http_client is None
        self.http_client = http_client or build_async_client(self.config.http_timeout)
        self.adapters = build_adapters(self.config, self.http_client)
        self.normalizer = Normalizer(self.config.timezone, clock=clock, rng=rng)
        self.synthesizer = self.normalizer.synthesizer
        self.coordinator = FallbackCoordinator(self.config)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> "ConditionsClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _adapter(self, source: str) -> Optional[SourceAdapter]:
        return self.adapters.get(source)

    def _weather_attempt(self, source: str, resort: ResortLocation) -> Attempt[WeatherSnapshot]:
        adapter = self.adapters[source]
        convert = self.normalizer.weather_unlocked if source == WEATHER_UNLOCKED else self.normalizer.open_meteo

        async def run() -> WeatherSnapshot:
            return convert(await adapter.fetch(resort))

        return Attempt(source, run)

    async def get_resort_weather_primary(self, resort: ResortLocation) -> WeatherSnapshot:
        """Weather for ``resort`` from the first source that answers.

        Raises :class:`SourceUnavailableError` when every source fails, unless
        weather is configured for synthetic fallback.
        """
        attempts = [
            self._weather_attempt(source, resort) for source in WEATHER_CHAIN if source in self.adapters
        ]
        with request_context(WEATHER_KIND, resort_id=resort.id):
            return await self.coordinator.resolve(WEATHER_KIND, attempts, self.synthesizer.weather)

    async def get_resort_weather(self, resort: ResortLocation) -> WeatherSnapshot:
        """Weather from the premium source alone; its errors propagate unchanged."""
        adapter = self._adapter(WEATHER_UNLOCKED)
        if adapter is None:
            raise ConfigurationError("WeatherUnlocked source is not enabled")
        with request_context(WEATHER_KIND, resort_id=resort.id, source=WEATHER_UNLOCKED):
            raw = await adapter.fetch(resort)
            return self.normalizer.weather_unlocked(raw)

    async def get_avalanche_danger(self) -> AvalancheAdvisory:
        adapter = self._adapter(AVALANCHE)
        attempts: List[Attempt[AvalancheAdvisory]] = []
        if adapter is not None:

            async def run() -> AvalancheAdvisory:
                return self.normalizer.avalanche(await adapter.fetch())

            attempts.append(Attempt(AVALANCHE, run))
        with request_context(AVALANCHE):
            return await self.coordinator.resolve(AVALANCHE, attempts, self.synthesizer.avalanche)

    async def get_chain_controls(self) -> List[ChainControlStatus]:
        adapter = self._adapter(CHAIN_CONTROL)
        attempts: List[Attempt[List[ChainControlStatus]]] = []
        if adapter is not None:

            async def run() -> List[ChainControlStatus]:
                return self.normalizer.chain_controls(await adapter.fetch())

            attempts.append(Attempt(CHAIN_CONTROL, run))
        with request_context(CHAIN_CONTROL):
            return await self.coordinator.resolve(CHAIN_CONTROL, attempts, self.synthesizer.chain_controls)
