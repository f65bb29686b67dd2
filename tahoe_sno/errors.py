from __future__ import annotations

from typing import Optional


class TahoeSnoError(Exception):
    """Base class for errors raised by the conditions aggregation layer."""


class NetworkError(TahoeSnoError):
    """The transport failed before an HTTP response was received."""


class UpstreamStatusError(TahoeSnoError):
    """An upstream provider answered with a non-success HTTP status."""

    def __init__(self, source: str, status_code: int, url: str = "") -> None:
        self.source = source
        self.status_code = status_code
        self.url = url
        super().__init__(f"{source} API error: {status_code}")


class ParseError(TahoeSnoError):
    """The upstream body could not be parsed into the expected shape."""


class ConfigurationError(TahoeSnoError):
    """A source cannot be used with the current configuration."""


class SourceUnavailableError(TahoeSnoError):
    """Every source for a data kind failed and no synthetic fallback applies."""

    def __init__(self, kind: str, cause: Optional[BaseException] = None) -> None:
        self.kind = kind
        self.cause = cause
        detail = str(cause) if cause is not None else "no sources attempted"
        super().__init__(f"Unable to load {kind} data: {detail}")

    @property
    def status_code(self) -> Optional[int]:
        if isinstance(self.cause, UpstreamStatusError):
            return self.cause.status_code
        return None
