from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from .controller import FilmBrowser, ViewState

PLACEHOLDER = "Select a movie to see the details"


def render_film_table(browser: FilmBrowser) -> Table:
    table = Table(title="Films")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Title")
    table.add_column("Episode", justify="right")
    table.add_column("Released")
    table.add_column("Rating", justify="right")
    for position, film in enumerate(browser.films, start=1):
        rating = f"{film.average_rating:.1f}" if film.rating_detail else "-"
        style = "bold reverse" if browser.is_selected(film) else None
        table.add_row(
            str(position),
            Text(film.title),
            str(film.episode_id),
            Text(film.release_date),
            rating,
            style=style,
        )
    return table


def render_detail(browser: FilmBrowser) -> RenderableType:
    film = browser.selected
    if film is None:
        return Panel(Text(PLACEHOLDER, style="dim"))
    if browser.state is ViewState.DETAIL_LOADING:
        return Panel(Spinner("dots", text=f"Loading ratings for {film.title}..."))
    lines: list[RenderableType] = []
    detail = browser.detail
    if detail and detail.poster:
        lines.append(Text(f"Poster: {detail.poster}", style="blue underline"))
    lines.append(Text(film.title, style="bold"))
    lines.append(Text.assemble(("Release date: ", "bold"), film.release_date))
    lines.append(Text.assemble(("Director: ", "bold"), film.director))
    if detail:
        for rating in detail.ratings:
            lines.append(Text.assemble((f"{rating.source}: ", "bold"), rating.value))
        lines.append(Text.assemble(("Average Rating: ", "bold"), f"{detail.average_rating} / 10"))
    return Panel(Group(*lines), title=f"Episode {film.episode_id}")


def render_error(browser: FilmBrowser) -> Text:
    return Text(browser.error or "", style="bold red")
