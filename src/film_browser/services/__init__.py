"""Service layer for the catalog and ratings endpoints."""

from . import catalog, omdb, ratings, telemetry

__all__ = [
    "catalog",
    "omdb",
    "ratings",
    "telemetry",
]
