from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import os
import tomllib

from dotenv import load_dotenv


@dataclass
class CatalogSettings:
    base_url: str = "https://swapi.dev/api"
    request_timeout_seconds: int = 15


@dataclass
class OMDbSettings:
    api_key: Optional[str] = None
    base_url: str = "https://www.omdbapi.com/"
    request_timeout_seconds: int = 10


@dataclass
class HTTPSettings:
    user_agent: str = "film-browser/0.1"


@dataclass
class Settings:
    catalog: CatalogSettings
    omdb: OMDbSettings
    http: HTTPSettings = field(default_factory=HTTPSettings)
    raw: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        omdb = dict(self.omdb.__dict__)
        if omdb.get("api_key"):
            omdb["api_key"] = "***"
        return {
            "catalog": self.catalog.__dict__,
            "omdb": omdb,
            "http": self.http.__dict__,
        }


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load configuration from TOML + environment variables."""
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parents[2] / "config" / "default.toml"

    data = _load_toml(config_path)
    catalog_cfg = data.get("catalog", {})
    omdb_cfg = data.get("omdb", {})
    http_cfg = data.get("http", {})

    catalog_settings = CatalogSettings(
        base_url=os.getenv("CATALOG_BASE_URL", catalog_cfg.get("base_url", "https://swapi.dev/api")),
        request_timeout_seconds=int(
            os.getenv("CATALOG_TIMEOUT", catalog_cfg.get("request_timeout_seconds", 15))
        ),
    )

    omdb_settings = OMDbSettings(
        api_key=os.getenv("OMDB_API_KEY", omdb_cfg.get("api_key")) or None,
        base_url=os.getenv("OMDB_BASE_URL", omdb_cfg.get("base_url", "https://www.omdbapi.com/")),
        request_timeout_seconds=int(
            os.getenv("OMDB_TIMEOUT", omdb_cfg.get("request_timeout_seconds", 10))
        ),
    )

    http_settings = HTTPSettings(
        user_agent=os.getenv("HTTP_USER_AGENT", http_cfg.get("user_agent", "film-browser/0.1")),
    )

    return Settings(
        catalog=catalog_settings,
        omdb=omdb_settings,
        http=http_settings,
        raw=data,
    )
