from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx

from .errors import NetworkError, ParseError, UpstreamStatusError
from .logging import get_logger

logger = get_logger(__name__)


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; TahoeSnoBot/1.0)"


def build_async_client(timeout: float = 10.0, **kwargs: Any) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": DEFAULT_USER_AGENT},
        **kwargs,
    )


class HttpFetcher:
    """Issues exactly one GET per call and maps failures onto the error taxonomy.

    There is no retry, caching, or rate limiting here: callers decide what to
    do after a failure.
    """

    def __init__(self, client: httpx.AsyncClient, *, source: str) -> None:
        self.client = client
        self.source = source

    async def fetch(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        logger.info("http.fetch", source=self.source, url=url)
        try:
            response = await self.client.get(url, params=params, headers=extra_headers)
        except httpx.HTTPError as exc:
            logger.warning("http.fetch.transport_error", source=self.source, url=url, error=str(exc))
            raise NetworkError(f"{self.source} request failed: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "http.fetch.bad_status",
                source=self.source,
                url=url,
                status_code=response.status_code,
            )
            raise UpstreamStatusError(self.source, response.status_code, str(response.url))
        return response

    async def fetch_json(self, url: str, **kwargs: Any) -> Any:
        response = await self.fetch(url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"{self.source} returned malformed JSON: {exc}") from exc

    async def fetch_text(self, url: str, **kwargs: Any) -> str:
        response = await self.fetch(url, **kwargs)
        return response.text
