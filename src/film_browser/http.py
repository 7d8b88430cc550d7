from __future__ import annotations

import httpx

from .config import Settings


def create_async_client(settings: Settings, *, timeout: float) -> httpx.AsyncClient:
    """Shared AsyncClient factory so both endpoints send the same headers."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.http.user_agent},
        timeout=timeout,
        follow_redirects=True,
    )
