from pathlib import Path

import pytest

from tahoe_sno.config import ClientConfig, Credentials, load_config


def test_defaults_from_packaged_yaml():
    config = load_config(env={})

    assert config.client.enabled_sources == {"open_meteo", "avalanche", "chain_control"}
    assert config.client.synthetic_fallback == {"avalanche", "chain_control"}
    assert config.client.timezone == "America/Los_Angeles"
    assert not config.client.weather_unlocked.is_real
    assert config.client.url_for("open_meteo") == "https://api.open-meteo.com/v1/forecast"
    assert config.logging.level == "INFO"
    assert {resort.name for resort in config.resorts} >= {"Palisades Tahoe", "Heavenly"}


def test_env_overrides():
    env = {
        "TAHOE_ENABLED_SOURCES": "open_meteo, weather_unlocked",
        "TAHOE_SYNTHETIC_FALLBACK": "weather,avalanche,chain_control",
        "TAHOE_WEATHER_UNLOCKED_APP_ID": "abc123",
        "TAHOE_WEATHER_UNLOCKED_APP_KEY": "secret",
        "TAHOE_TIMEZONE": "America/Denver",
        "TAHOE_HTTP_TIMEOUT": "3.5",
        "TAHOE_CHAIN_CONTROL_URL": "http://localhost:9000/chains.json",
        "TAHOE_LOG_LEVEL": "debug",
        "TAHOE_LOG_JSON": "no",
    }

    config = load_config(env=env)

    assert config.client.enabled_sources == {"open_meteo", "weather_unlocked"}
    assert config.client.masks_failures("weather")
    assert config.client.weather_unlocked == Credentials(app_id="abc123", app_key="secret")
    assert config.client.weather_unlocked.is_real
    assert config.client.timezone == "America/Denver"
    assert config.client.http_timeout == 3.5
    assert config.client.url_for("chain_control") == "http://localhost:9000/chains.json"
    assert config.client.url_for("avalanche") == "https://www.sierraavalanchecenter.org/xml"
    assert config.logging.level == "debug"
    assert config.logging.json is False


def test_invalid_timeout_is_ignored():
    config = load_config(env={"TAHOE_HTTP_TIMEOUT": "soon"})
    assert config.client.http_timeout == 10.0


def test_yaml_file_overrides(tmp_path: Path):
    override = tmp_path / "tahoe.yaml"
    override.write_text(
        "client:\n"
        "  enabled_sources: [open_meteo]\n"
        "  weather_unlocked:\n"
        "    app_id: from-file\n"
        "resorts:\n"
        "  - id: kirkwood\n"
        "    name: Kirkwood\n"
        "    latitude: 38.685\n"
        "    longitude: -120.065\n"
    )

    config = load_config(env={"TAHOE_CONFIG_PATH": str(override)})

    assert config.client.enabled_sources == {"open_meteo"}
    assert config.client.weather_unlocked.app_id == "from-file"
    assert not config.client.weather_unlocked.is_real
    assert [resort.id for resort in config.resorts] == ["kirkwood"]


def test_unknown_sources_are_rejected():
    with pytest.raises(ValueError):
        load_config(env={"TAHOE_ENABLED_SOURCES": "open_meteo,noaa"})
    with pytest.raises(ValueError):
        ClientConfig(synthetic_fallback=frozenset({"rankings"}))


def test_client_config_is_hashable_and_read_only():
    config = ClientConfig(base_urls={"avalanche": "http://localhost/feed"})

    assert hash(config) == hash(ClientConfig(base_urls={"avalanche": "http://localhost/feed"}))
    assert config.url_for("avalanche") == "http://localhost/feed"
    with pytest.raises(TypeError):
        config.base_urls["avalanche"] = "http://elsewhere"
