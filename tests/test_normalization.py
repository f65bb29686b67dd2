import random
from datetime import date, datetime, timedelta, timezone

import pytest

from payloads import TODAY, chain_control_payload, fixed_clock, open_meteo_payload, weather_unlocked_payload

from tahoe_sno.errors import ParseError
from tahoe_sno.models import CHAIN_STATUSES, ROUTE_DESCRIPTIONS
from tahoe_sno.normalization import (
    Normalizer,
    current_hour_index,
    parse_date,
    round_half_up,
    window_start,
)
from tahoe_sno.sources.avalanche import AvalancheFeed
from tahoe_sno.sources.caltrans import ChainControlLayer, parse_layers
from tahoe_sno.sources.open_meteo import parse_forecast as parse_open_meteo
from tahoe_sno.sources.weather_unlocked import parse_forecast as parse_weather_unlocked


@pytest.fixture
def normalizer() -> Normalizer:
    return Normalizer("America/Los_Angeles", clock=fixed_clock, rng=random.Random(7))


def test_snowfall_scenario_first_forecast_day(normalizer):
    raw = parse_open_meteo(open_meteo_payload([2, 0, 0, 5, 1]))

    snapshot = normalizer.open_meteo(raw)

    first = snapshot.forecast[0]
    assert first.date == TODAY
    assert first.freshsnow_cm == 20
    assert first.condition == "snow"
    assert snapshot.forecast[3].freshsnow_cm == 50
    assert snapshot.forecast[4].condition == "partly-cloudy"
    assert snapshot.freshsnow_cm == 20
    assert snapshot.description == "snow"


def test_current_values_and_units(normalizer):
    raw = parse_open_meteo(open_meteo_payload([2, 0, 0, 5, 1]))

    snapshot = normalizer.open_meteo(raw)

    assert snapshot.base_depth_cm == 50
    assert snapshot.summit_depth_cm == 75
    assert snapshot.temp_c == -3
    assert snapshot.wind_speed_mph == 15
    assert snapshot.forecast[0].temp_high_c == 2
    assert snapshot.forecast[0].temp_low_c == -7
    assert all(day.wind_speed_mph == 15 for day in snapshot.forecast)


@pytest.mark.parametrize("length", range(0, 15))
def test_window_lengths_follow_series_length(normalizer, length):
    snowfall = [float(index % 3) for index in range(length)]
    raw = parse_open_meteo(open_meteo_payload(snowfall, start=TODAY - timedelta(days=min(length, 7))))

    snapshot = normalizer.open_meteo(raw)

    assert len(snapshot.forecast) == min(5, length)
    assert len(snapshot.historical) == min(7, length)
    forecast_dates = [day.date for day in snapshot.forecast]
    historical_dates = [day.date for day in snapshot.historical]
    assert forecast_dates == sorted(forecast_dates)
    assert historical_dates == sorted(historical_dates)


def test_forecast_window_starts_today_with_past_days(normalizer):
    # Seven past days, today, four future days: the shape Open-Meteo returns.
    raw = parse_open_meteo(open_meteo_payload([0.0] * 7 + [3.0] + [0.0] * 4, start=TODAY - timedelta(days=7)))

    snapshot = normalizer.open_meteo(raw)

    assert [day.date for day in snapshot.forecast] == [TODAY + timedelta(days=n) for n in range(5)]
    assert snapshot.forecast[0].freshsnow_cm == 30
    assert snapshot.freshsnow_cm == 30
    assert [day.date for day in snapshot.historical] == [TODAY + timedelta(days=n) for n in range(-2, 5)]


def test_forecast_window_without_today_starts_at_first_day(normalizer):
    start = date(2023, 12, 1)
    raw = parse_open_meteo(open_meteo_payload([0.0] * 10, start=start))

    snapshot = normalizer.open_meteo(raw)

    assert snapshot.forecast[0].date == start


def test_window_start_is_clamped():
    dates = [TODAY + timedelta(days=n) for n in range(-9, 3)]
    assert window_start(dates, TODAY, 5) == 7
    assert window_start(dates, TODAY - timedelta(days=9), 5) == 0
    assert window_start([], TODAY, 0) == 0


def test_current_hour_matches_hour_of_day_not_date(normalizer):
    # The earliest day with the current hour wins, even though it is a week old.
    raw = parse_open_meteo(open_meteo_payload([0.0] * 12, start=TODAY - timedelta(days=7)))

    snapshot = normalizer.open_meteo(raw)

    assert snapshot.base_depth_cm == 50
    assert snapshot.temp_c == -3
    local_now = normalizer.local_now()
    assert current_hour_index(raw.hourly_time, local_now) == 12


def test_missing_hour_defaults_to_zero(normalizer):
    payload = open_meteo_payload([1.5])
    payload["hourly"] = {"time": ["2024-01-10T03:00"], "temperature_2m": [-8.0], "snowfall": [0.0], "snow_depth": [1.2]}

    snapshot = normalizer.open_meteo(parse_open_meteo(payload))

    assert snapshot.base_depth_cm == 0
    assert snapshot.summit_depth_cm == 0
    assert snapshot.temp_c == 0


def test_null_values_become_conservative_defaults(normalizer):
    payload = open_meteo_payload([None, 0.3])
    payload["daily"]["temperature_2m_max"] = [None, 1.0]
    payload["hourly"]["snow_depth"] = [None] * len(payload["hourly"]["time"])

    snapshot = normalizer.open_meteo(parse_open_meteo(payload))

    assert snapshot.forecast[0].freshsnow_cm == 0
    assert snapshot.forecast[0].temp_high_c == 0
    assert snapshot.forecast[0].condition in {"sunny", "cloudy"}
    assert snapshot.forecast[1].condition == "partly-cloudy"
    assert snapshot.base_depth_cm == 0


def test_empty_series_is_unknown(normalizer):
    snapshot = normalizer.open_meteo(parse_open_meteo(open_meteo_payload([])))

    assert snapshot.forecast == ()
    assert snapshot.historical == ()
    assert snapshot.description == "Unknown"
    assert snapshot.freshsnow_cm == 0


def test_weather_unlocked_normalization(normalizer):
    snapshot = normalizer.weather_unlocked(parse_weather_unlocked(weather_unlocked_payload(days=6)))

    assert snapshot.base_depth_cm == 112
    assert snapshot.summit_depth_cm == 191
    assert snapshot.freshsnow_cm == 12
    assert snapshot.description == "Heavy snow"
    assert snapshot.temp_c == -4
    assert snapshot.wind_speed_mph == 22
    assert len(snapshot.forecast) == 5
    assert [day.condition for day in snapshot.forecast] == ["snow", "rain", "sunny", "partly-cloudy", "cloudy"]
    assert snapshot.forecast[0].date == TODAY
    assert snapshot.forecast[0].temp_high_c == 2
    assert snapshot.forecast[0].temp_low_c == -7
    # No history upstream, so the week is synthetic and ends today.
    assert len(snapshot.historical) == 7
    assert snapshot.historical[-1].date == TODAY
    assert all(0 <= day.snow_cm < 20 for day in snapshot.historical)


def test_weather_unlocked_missing_fields_default(normalizer):
    snapshot = normalizer.weather_unlocked(parse_weather_unlocked({"forecast": []}))

    assert snapshot.base_depth_cm == 0
    assert snapshot.description == "Unknown"
    assert snapshot.temp_c == 0
    assert snapshot.forecast == ()


def test_parse_date_formats():
    assert parse_date("2024-01-10") == TODAY
    assert parse_date("10/01/2024") == TODAY
    with pytest.raises(ParseError):
        parse_date("Jan 10")


def test_avalanche_normalization(normalizer):
    description = (
        "Avalanche danger level 3 today. Wind Slab and Storm Slab problems with Cornice Fall "
        "and Loose Snow possible. " + "x" * 300
    )

    advisory = normalizer.avalanche(AvalancheFeed(description=description))

    assert advisory.danger_level == 3
    assert advisory.problems == ("Wind Slab", "Storm Slab", "Cornice Fall")
    assert advisory.text == description[:200] + "..."
    assert advisory.last_updated == fixed_clock()


@pytest.mark.parametrize(
    "description, expected",
    [("No rating issued.", 2), ("DANGER LEVEL 9 extreme", 5), ("danger level 0", 1), ("danger level 1", 1)],
)
def test_avalanche_danger_level_bounds(normalizer, description, expected):
    assert normalizer.avalanche(AvalancheFeed(description=description)).danger_level == expected


def test_chain_controls_normalization(normalizer):
    statuses = normalizer.chain_controls(parse_layers(chain_control_payload()))

    assert [status.route for status in statuses] == ["I-80", "US-50", "SR-89"]
    assert [status.status for status in statuses] == ["Required", "Advised", "None"]
    for status in statuses:
        assert status.description == ROUTE_DESCRIPTIONS[status.route]


def test_chain_status_mapping(normalizer):
    layers = [ChainControlLayer(name="SR-89 Emerald Bay", description="", status="Closed - travel PROHIBITED")]

    statuses = {status.route: status.status for status in normalizer.chain_controls(layers)}

    assert statuses["SR-89"] == "Prohibited"
    assert set(statuses.values()) <= set(CHAIN_STATUSES)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(None) == 0


def test_local_now_uses_configured_timezone():
    normalizer = Normalizer("America/Los_Angeles", clock=lambda: datetime(2024, 1, 11, 3, 0, tzinfo=timezone.utc))
    assert normalizer.today() == TODAY
