from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings
from ..http import create_async_client


@dataclass
class Film:
    title: str
    episode_id: int
    release_date: str
    director: str


class CatalogClient:
    """Async wrapper around the SWAPI films endpoint."""

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = settings.catalog.base_url.rstrip("/")
        self._client = http_client or create_async_client(
            settings, timeout=settings.catalog.request_timeout_seconds
        )

    async def fetch_films(self) -> List[Film]:
        response = await self._client.get(f"{self.base_url}/films/", params={"format": "json"})
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise ValueError("Catalog response has no results list.")
        return [self._parse_film(record) for record in data["results"] if isinstance(record, dict)]

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _parse_film(record: Dict[str, Any]) -> Film:
        episode_id = record.get("episode_id")
        try:
            episode_id = int(episode_id) if episode_id is not None else 0
        except (TypeError, ValueError):
            episode_id = 0
        return Film(
            title=str(record.get("title") or ""),
            episode_id=episode_id,
            release_date=str(record.get("release_date") or ""),
            director=str(record.get("director") or ""),
        )
