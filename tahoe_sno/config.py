from __future__ import annotations

import os
from types import MappingProxyType
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

import yaml
from dotenv import load_dotenv

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "data" / "defaults.yaml"

OPEN_METEO = "open_meteo"
WEATHER_UNLOCKED = "weather_unlocked"
AVALANCHE = "avalanche"
CHAIN_CONTROL = "chain_control"
SOURCES = (OPEN_METEO, WEATHER_UNLOCKED, AVALANCHE, CHAIN_CONTROL)

WEATHER_KIND = "weather"
DATA_KINDS = (WEATHER_KIND, AVALANCHE, CHAIN_CONTROL)

PLACEHOLDER_APP_ID = "YOUR_APP_ID"
PLACEHOLDER_APP_KEY = "YOUR_APP_KEY"

DEFAULT_BASE_URLS: Dict[str, str] = {
    OPEN_METEO: "https://api.open-meteo.com/v1/forecast",
    WEATHER_UNLOCKED: "https://api.weatherunlocked.com/api/resortforecast",
    AVALANCHE: "https://www.sierraavalanchecenter.org/xml",
    CHAIN_CONTROL: "https://quickmap.dot.ca.gov/QuickMap.json",
}


def _bool_from_env(value: str | None) -> Optional[bool]:
    if value is None:
        return None
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return None


def _list_from_env(value: str | None) -> Optional[List[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _merge_dicts(base: Dict, overrides: Mapping) -> Dict:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), Mapping):
            merged[key] = _merge_dicts(base[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text()) or {}


def _validated(values: Iterable[str], allowed: Iterable[str], label: str) -> FrozenSet[str]:
    result = frozenset(values)
    unknown = result - set(allowed)
    if unknown:
        raise ValueError(f"Unknown {label}: {', '.join(sorted(unknown))}")
    return result


@dataclass(frozen=True)
class Credentials:
    app_id: str = PLACEHOLDER_APP_ID
    app_key: str = PLACEHOLDER_APP_KEY

    @property
    def is_real(self) -> bool:
        """True when both values are set and differ from the shipped placeholders."""
        if not self.app_id or not self.app_key:
            return False
        return self.app_id != PLACEHOLDER_APP_ID and self.app_key != PLACEHOLDER_APP_KEY


@dataclass(frozen=True)
class ClientConfig:
    """Everything a :class:`~tahoe_sno.client.ConditionsClient` recognises."""

    enabled_sources: FrozenSet[str] = frozenset({OPEN_METEO, AVALANCHE, CHAIN_CONTROL})
    synthetic_fallback: FrozenSet[str] = frozenset({AVALANCHE, CHAIN_CONTROL})
    weather_unlocked: Credentials = field(default_factory=Credentials)
    base_urls: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_BASE_URLS), hash=False)
    timezone: str = "America/Los_Angeles"
    http_timeout: float = 10.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "enabled_sources", _validated(self.enabled_sources, SOURCES, "sources")
        )
        object.__setattr__(
            self,
            "synthetic_fallback",
            _validated(self.synthetic_fallback, DATA_KINDS, "data kinds"),
        )
        object.__setattr__(
            self, "base_urls", MappingProxyType({**DEFAULT_BASE_URLS, **dict(self.base_urls)})
        )

    def is_enabled(self, source: str) -> bool:
        return source in self.enabled_sources

    def masks_failures(self, kind: str) -> bool:
        return kind in self.synthetic_fallback

    def url_for(self, source: str) -> str:
        return self.base_urls[source]


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = True


@dataclass
class ResortSettings:
    id: str
    name: str
    latitude: float
    longitude: float


@dataclass
class AppConfig:
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    resorts: List[ResortSettings] = field(default_factory=list)


def _client_config(data: Mapping, env: Mapping[str, str]) -> ClientConfig:
    data = dict(data)

    sources_override = _list_from_env(env.get("TAHOE_ENABLED_SOURCES"))
    if sources_override is not None:
        data["enabled_sources"] = sources_override
    fallback_override = _list_from_env(env.get("TAHOE_SYNTHETIC_FALLBACK"))
    if fallback_override is not None:
        data["synthetic_fallback"] = fallback_override

    credentials = dict(data.get("weather_unlocked") or {})
    app_id = env.get("TAHOE_WEATHER_UNLOCKED_APP_ID")
    if app_id:
        credentials["app_id"] = app_id
    app_key = env.get("TAHOE_WEATHER_UNLOCKED_APP_KEY")
    if app_key:
        credentials["app_key"] = app_key

    base_urls = dict(data.get("base_urls") or {})
    for source in SOURCES:
        url = env.get(f"TAHOE_{source.upper()}_URL")
        if url:
            base_urls[source] = url

    timezone_override = env.get("TAHOE_TIMEZONE")
    if timezone_override:
        data["timezone"] = timezone_override
    timeout_override = env.get("TAHOE_HTTP_TIMEOUT")
    if timeout_override:
        try:
            data["http_timeout"] = float(timeout_override)
        except ValueError:
            pass

    kwargs = {}
    if "enabled_sources" in data:
        kwargs["enabled_sources"] = frozenset(data["enabled_sources"] or ())
    if "synthetic_fallback" in data:
        kwargs["synthetic_fallback"] = frozenset(data["synthetic_fallback"] or ())
    if "timezone" in data:
        kwargs["timezone"] = str(data["timezone"])
    if "http_timeout" in data:
        kwargs["http_timeout"] = float(data["http_timeout"])

    return ClientConfig(
        weather_unlocked=Credentials(**credentials),
        base_urls=base_urls,
        **kwargs,
    )


def load_config(*, config_path: str | None = None, env: Mapping[str, str] | None = None) -> AppConfig:
    if env is None:
        load_dotenv()
        env = os.environ
    env = dict(env)
    data = _load_yaml(_DEFAULT_CONFIG_PATH)

    explicit_path = config_path or env.get("TAHOE_CONFIG_PATH")
    if explicit_path:
        data = _merge_dicts(data, _load_yaml(Path(explicit_path)))

    logging_data = dict(data.get("logging") or {})
    level_override = env.get("TAHOE_LOG_LEVEL")
    if level_override:
        logging_data["level"] = level_override
    json_override = _bool_from_env(env.get("TAHOE_LOG_JSON"))
    if json_override is not None:
        logging_data["json"] = json_override

    resorts = [ResortSettings(**resort) for resort in data.get("resorts", [])]

    return AppConfig(
        client=_client_config(data.get("client") or {}, env),
        logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
        resorts=resorts,
    )
