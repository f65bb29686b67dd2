"""Shared pieces for upstream source adapters."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Mapping, Optional, Sequence, TypeVar

from ..errors import ParseError
from ..http_client import HttpFetcher

RawPayload = TypeVar("RawPayload")


class SourceAdapter(ABC, Generic[RawPayload]):
    """Fetch and parse one upstream provider's payload.

    ``fetch`` issues a single request and raises ``NetworkError``,
    ``UpstreamStatusError`` or ``ParseError``; it never retries.
    """

    name: str = ""

    def __init__(self, fetcher: HttpFetcher, url: str) -> None:
        self.fetcher = fetcher
        self.url = url

    @abstractmethod
    async def fetch(self, params: Any = None) -> RawPayload:
        raise NotImplementedError


def require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ParseError(f"Expected {what} to be an object, got {type(value).__name__}")
    return value


def require_list(value: Any, what: str) -> List[Any]:
    if not isinstance(value, list):
        raise ParseError(f"Expected {what} to be a list, got {type(value).__name__}")
    return value


def optional_number(value: Any, what: str) -> Optional[float]:
    """Coerce a JSON number, keeping ``null`` as ``None``."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ParseError(f"Expected {what} to be numeric, got a boolean")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Expected {what} to be numeric, got {value!r}") from exc


def number_series(block: Mapping[str, Any], key: str, length: int, what: str) -> List[Optional[float]]:
    values: Sequence[Any] = require_list(block.get(key), f"{what}.{key}")
    if len(values) != length:
        raise ParseError(f"{what}.{key} has {len(values)} values, expected {length}")
    return [optional_number(value, f"{what}.{key}") for value in values]
