from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings
from ..http import create_async_client
from .ratings import Rating, average_rating


@dataclass
class RatingDetail:
    poster: Optional[str]
    ratings: List[Rating]
    average_rating: float
    raw: Dict[str, Any] = field(default_factory=dict)


class OMDbClient:
    """Looks up OMDb ratings by title."""

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not settings.omdb.api_key:
            raise ValueError("OMDb API key is not configured.")
        self.api_key = settings.omdb.api_key
        self.base_url = settings.omdb.base_url
        self._client = http_client or create_async_client(
            settings, timeout=settings.omdb.request_timeout_seconds
        )

    async def fetch_rating_detail(self, title: str) -> Optional[RatingDetail]:
        """Return the rating detail for ``title`` or None when OMDb has no match."""
        response = await self._client.get(
            self.base_url, params={"t": title, "apikey": self.api_key}
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict) or data.get("Response") != "True":
            return None
        if not isinstance(data.get("Ratings") or [], list):
            return None
        return self._parse_detail(data)

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _parse_detail(data: Dict[str, Any]) -> RatingDetail:
        ratings = [
            Rating(source=str(entry.get("Source") or ""), value=str(entry.get("Value") or ""))
            for entry in data.get("Ratings") or []
            if isinstance(entry, dict)
        ]
        poster = data.get("Poster")
        if not isinstance(poster, str) or not poster or poster == "N/A":
            poster = None
        return RatingDetail(
            poster=poster,
            ratings=ratings,
            average_rating=average_rating(ratings),
            raw=dict(data),
        )
