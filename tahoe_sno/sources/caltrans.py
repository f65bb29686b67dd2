"""Caltrans QuickMap chain control layer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .base import SourceAdapter, require_list, require_mapping

SOURCE_ID = "chain_control"


@dataclass(frozen=True)
class ChainControlLayer:
    name: str
    description: str
    status: Optional[str]


def parse_layers(data: object) -> List[ChainControlLayer]:
    body = require_mapping(data, "response")
    layers = []
    for index, entry in enumerate(require_list(body.get("layers", []), "layers")):
        layer = require_mapping(entry, f"layers[{index}]")
        status = layer.get("status")
        layers.append(
            ChainControlLayer(
                name=str(layer.get("name") or ""),
                description=str(layer.get("description") or ""),
                status=None if status is None else str(status),
            )
        )
    return layers


class ChainControlAdapter(SourceAdapter[List[ChainControlLayer]]):
    name = SOURCE_ID

    async def fetch(self, params: None = None) -> List[ChainControlLayer]:
        data = await self.fetcher.fetch_json(self.url, params={"layers": "chainControls"})
        return parse_layers(data)
