from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Protocol, Union

import httpx

from .services.catalog import Film
from .services.omdb import RatingDetail
from .services.telemetry import report_failure

LOAD_ERROR_MESSAGE = "Failed to load films"


class ViewState(str, Enum):
    LOADING_LIST = "loading-list"
    LIST_READY = "list-ready"
    DETAIL_LOADING = "detail-loading"
    DETAIL_READY = "detail-ready"
    ERROR = "error"


class SortKey(str, Enum):
    EPISODE = "episode"
    YEAR = "year"
    RATING = "rating"


class CatalogSource(Protocol):
    async def fetch_films(self) -> List[Film]: ...


class RatingSource(Protocol):
    async def fetch_rating_detail(self, title: str) -> Optional[RatingDetail]: ...


@dataclass
class EnrichedFilm(Film):
    average_rating: float = 0.0
    rating_detail: Optional[RatingDetail] = None

    @classmethod
    def from_film(cls, film: Film) -> "EnrichedFilm":
        return cls(
            title=film.title,
            episode_id=film.episode_id,
            release_date=film.release_date,
            director=film.director,
        )


class FilmBrowser:
    """
    List/detail state for the film browser.

    ``films`` is the backing list and ``selected`` always points at one of its
    entries, so merging rating detail into the list updates the selection too.
    Rating detail is cached on each film and fetched at most once per title;
    selections racing on the same uncached title share a single request.
    """

    def __init__(self, catalog: CatalogSource, ratings: Optional[RatingSource] = None) -> None:
        self.catalog = catalog
        self.ratings = ratings
        self.films: List[EnrichedFilm] = []
        self.selected: Optional[EnrichedFilm] = None
        self.detail: Optional[RatingDetail] = None
        self.error: Optional[str] = None
        self.state = ViewState.LOADING_LIST
        self._pending: Dict[str, asyncio.Task] = {}

    async def load(self) -> List[EnrichedFilm]:
        self.state = ViewState.LOADING_LIST
        self.error = None
        try:
            films = await self.catalog.fetch_films()
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            report_failure("catalog fetch", exc)
            self.films = []
            self.error = LOAD_ERROR_MESSAGE
            self.state = ViewState.ERROR
            return self.films
        self.films = [EnrichedFilm.from_film(film) for film in films]
        self.state = ViewState.LIST_READY
        return self.films

    async def select(self, film: EnrichedFilm) -> Optional[RatingDetail]:
        self.selected = film
        if film.rating_detail is not None:
            self.detail = film.rating_detail
            self.state = ViewState.DETAIL_READY
            return self.detail
        self.detail = None
        self.state = ViewState.DETAIL_LOADING
        detail = await self._fetch_detail(film.title)
        if self.selected is None or self.selected.title != film.title:
            # superseded by a newer selection; the list was still updated
            return detail
        self.detail = detail
        self.state = ViewState.DETAIL_READY
        return detail

    async def select_by_index(self, position: int) -> Optional[RatingDetail]:
        return await self.select(self.film_at(position))

    def film_at(self, position: int) -> EnrichedFilm:
        """1-based lookup into the list as currently sorted."""
        if position < 1 or position > len(self.films):
            raise IndexError(f"No film at position {position}.")
        return self.films[position - 1]

    def find(self, query: str) -> Optional[EnrichedFilm]:
        """Match by episode number, exact title, then title substring."""
        query = query.strip()
        if not query:
            return None
        if query.isdigit():
            episode = int(query)
            return next((film for film in self.films if film.episode_id == episode), None)
        lowered = query.lower()
        for film in self.films:
            if film.title.lower() == lowered:
                return film
        return next((film for film in self.films if lowered in film.title.lower()), None)

    def sort(self, key: Union[SortKey, str]) -> List[EnrichedFilm]:
        key = SortKey(key)
        if key is SortKey.EPISODE:
            self.films.sort(key=lambda film: film.episode_id)
        elif key is SortKey.YEAR:
            self.films.sort(key=lambda film: film.release_date)
        else:
            self.films.sort(key=lambda film: film.average_rating, reverse=True)
        return self.films

    def is_selected(self, film: EnrichedFilm) -> bool:
        return self.selected is film

    async def _fetch_detail(self, title: str) -> Optional[RatingDetail]:
        task = self._pending.get(title)
        if task is None:
            task = asyncio.create_task(self._load_detail(title))
            self._pending[title] = task
        return await task

    async def _load_detail(self, title: str) -> Optional[RatingDetail]:
        try:
            if self.ratings is None:
                return None
            try:
                detail = await self.ratings.fetch_rating_detail(title)
            except (httpx.HTTPError, ValueError) as exc:
                report_failure(f"rating detail [{title}]", exc)
                return None
            if detail is not None:
                self._merge(title, detail)
            return detail
        finally:
            self._pending.pop(title, None)

    def _merge(self, title: str, detail: RatingDetail) -> None:
        for film in self.films:
            if film.title == title:
                film.average_rating = detail.average_rating
                film.rating_detail = detail
        if self.selected is not None and self.selected.title == title:
            self.selected.average_rating = detail.average_rating
            self.selected.rating_detail = detail
