from typing import Any, Dict, List, Optional

import httpx

from film_browser.config import CatalogSettings, HTTPSettings, OMDbSettings, Settings


class DummyResponse:
    def __init__(self, payload: Any, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise httpx.HTTPError(f"HTTP {self.status_code}")


class DummyAsyncHTTPClient:
    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = responses or []
        self.calls: List[tuple[str, Dict[str, Any]]] = []
        self.closed = False

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> DummyResponse:
        self.calls.append((url, params or {}))
        entry: Any = self.responses.pop(0) if self.responses else {}
        if isinstance(entry, tuple):
            payload, status = entry
            return DummyResponse(payload, status_code=status)
        return DummyResponse(entry)

    async def aclose(self) -> None:
        self.closed = True


def make_settings(api_key: Optional[str] = "key") -> Settings:
    return Settings(
        catalog=CatalogSettings(base_url="https://catalog/api/"),
        omdb=OMDbSettings(api_key=api_key, base_url="https://omdb/"),
        http=HTTPSettings(user_agent="test-agent"),
        raw={},
    )
