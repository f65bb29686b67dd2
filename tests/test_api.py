from __future__ import annotations

import logging
import random
from typing import Callable, Iterator

import httpx
import pytest
import structlog
from fastapi.testclient import TestClient

from payloads import fixed_clock, open_meteo_payload

from tahoe_sno.api import create_app
from tahoe_sno.client import ConditionsClient
from tahoe_sno.config import AppConfig, ClientConfig, LoggingConfig, ResortSettings, load_config
from tahoe_sno.logging import get_logger, setup_logging

RESORTS = [ResortSettings(id="333005", name="Palisades Tahoe", latitude=39.1968, longitude=-120.2354)]


def _test_client(handler: Callable[[httpx.Request], httpx.Response]) -> TestClient:
    config = AppConfig(client=ClientConfig(), logging=LoggingConfig(json=False), resorts=RESORTS)
    client = ConditionsClient(
        config.client,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        rng=random.Random(5),
        clock=fixed_clock,
    )
    return TestClient(create_app(config, client=client))


def _upstream(request: httpx.Request) -> httpx.Response:
    if request.url.host == "api.open-meteo.com":
        return httpx.Response(200, json=open_meteo_payload([2, 0, 0, 5, 1]))
    return httpx.Response(503)


def test_list_resorts():
    response = _test_client(_upstream).get("/resorts")

    assert response.status_code == 200
    assert response.json() == [
        {"id": "333005", "name": "Palisades Tahoe", "latitude": 39.1968, "longitude": -120.2354}
    ]


def test_weather_endpoint():
    response = _test_client(_upstream).get("/resorts/333005/weather")

    assert response.status_code == 200
    body = response.json()
    assert body["forecast"][0] == {
        "date": "2024-01-10",
        "temp_high_c": 2,
        "temp_low_c": -7,
        "freshsnow_cm": 20,
        "wind_speed_mph": 15,
        "condition": "snow",
    }
    assert len(body["historical"]) == 5


def test_weather_endpoint_unknown_resort():
    response = _test_client(_upstream).get("/resorts/nowhere/weather")

    assert response.status_code == 404


def test_weather_endpoint_reports_upstream_failure():
    response = _test_client(lambda _: httpx.Response(500)).get("/resorts/333005/weather")

    assert response.status_code == 502
    assert response.json()["detail"] == "Unable to load weather data: open_meteo API error: 500"


def test_advisory_endpoints_always_answer():
    client = _test_client(_upstream)

    avalanche = client.get("/avalanche")
    chains = client.get("/chain-controls")

    assert avalanche.status_code == 200
    assert 1 <= avalanche.json()["danger_level"] <= 5
    assert chains.status_code == 200
    assert [item["route"] for item in chains.json()] == ["I-80", "US-50", "SR-89"]


@pytest.fixture
def restore_logging() -> Iterator[None]:
    yield
    setup_logging(LoggingConfig(), force=True)


def test_create_app_applies_logging_overrides(restore_logging):
    module_logger = get_logger("tahoe_sno.tests")
    config = load_config(env={"TAHOE_LOG_LEVEL": "ERROR", "TAHOE_LOG_JSON": "false"})

    create_app(config, client=ConditionsClient(config.client, http_client=httpx.AsyncClient()))

    active = structlog.get_config()
    assert active["wrapper_class"].__name__ == "BoundLoggerFilteringAtError"
    assert isinstance(active["processors"][-1], structlog.dev.ConsoleRenderer)
    assert logging.getLogger().level == logging.ERROR
    assert type(module_logger.bind()).__name__ == "BoundLoggerFilteringAtError"
