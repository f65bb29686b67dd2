"""HTTP surface for UI consumers.

Run with ``uvicorn tahoe_sno.api:create_app --factory``.
"""
from __future__ import annotations

import datetime as dt
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from tahoe_sno.client import ConditionsClient
from tahoe_sno.config import AppConfig, load_config
from tahoe_sno.errors import SourceUnavailableError
from tahoe_sno.logging import get_logger, setup_logging
from tahoe_sno.resorts import all_resorts, resort_lookup

logger = get_logger(__name__)


class ResortPayload(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float


class DailyForecastPayload(BaseModel):
    date: dt.date
    temp_high_c: int
    temp_low_c: int
    freshsnow_cm: int
    wind_speed_mph: int
    condition: str


class DailySnowPayload(BaseModel):
    date: dt.date
    snow_cm: int


class WeatherPayload(BaseModel):
    base_depth_cm: int
    summit_depth_cm: int
    freshsnow_cm: int
    description: str
    temp_c: int
    wind_speed_mph: int
    forecast: List[DailyForecastPayload]
    historical: List[DailySnowPayload]


class AvalanchePayload(BaseModel):
    danger_level: int
    text: str
    problems: List[str]
    last_updated: dt.datetime


class ChainControlPayload(BaseModel):
    route: str
    status: str
    description: str
    last_updated: dt.datetime


def create_app(config: Optional[AppConfig] = None, *, client: Optional[ConditionsClient] = None) -> FastAPI:
    config = config or load_config()
    setup_logging(config.logging, force=True)
    client = client or ConditionsClient(config.client)
    resorts = all_resorts(config)
    resort_index = resort_lookup(resorts)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("api.start", resorts=len(resorts))
        yield
        await client.aclose()
        logger.info("api.stop")

    app = FastAPI(title="TahoeSno API", lifespan=lifespan)
    app.state.client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/resorts", response_model=List[ResortPayload])
    def get_resorts() -> List[ResortPayload]:
        return [
            ResortPayload(id=resort.id, name=resort.name, latitude=resort.latitude, longitude=resort.longitude)
            for resort in resorts
        ]

    @app.get("/resorts/{resort_id}/weather", response_model=WeatherPayload)
    async def get_weather(resort_id: str) -> WeatherPayload:
        resort = resort_index.get(resort_id)
        if resort is None:
            raise HTTPException(status_code=404, detail=f"Unknown resort_id: {resort_id}")
        try:
            snapshot = await client.get_resort_weather_primary(resort)
        except SourceUnavailableError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return WeatherPayload(**snapshot.to_dict())

    @app.get("/avalanche", response_model=AvalanchePayload)
    async def get_avalanche() -> AvalanchePayload:
        advisory = await client.get_avalanche_danger()
        return AvalanchePayload(**advisory.to_dict())

    @app.get("/chain-controls", response_model=List[ChainControlPayload])
    async def get_chain_controls() -> List[ChainControlPayload]:
        statuses = await client.get_chain_controls()
        return [ChainControlPayload(**status.to_dict()) for status in statuses]

    return app
