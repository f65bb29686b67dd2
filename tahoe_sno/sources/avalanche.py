"""Sierra Avalanche Center advisory RSS feed."""
from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup

from ..errors import ParseError
from .base import SourceAdapter

SOURCE_ID = "avalanche"


@dataclass(frozen=True)
class AvalancheFeed:
    description: str


def parse_feed(document: str) -> AvalancheFeed:
    """Pull the first ``<description>`` out of the advisory feed."""
    if not document or not document.strip():
        raise ParseError("Avalanche feed is empty")
    soup = BeautifulSoup(document, "xml")
    node = soup.find("description")
    if node is None:
        raise ParseError("Avalanche feed has no description element")
    return AvalancheFeed(description=node.get_text().strip())


class AvalancheAdapter(SourceAdapter[AvalancheFeed]):
    name = SOURCE_ID

    async def fetch(self, params: None = None) -> AvalancheFeed:
        document = await self.fetcher.fetch_text(self.url)
        return parse_feed(document)
