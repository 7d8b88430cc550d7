from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import AsyncIterator, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .config import Settings, load_settings
from .controller import FilmBrowser, SortKey, ViewState
from .services import telemetry as telemetry_service
from .services.catalog import CatalogClient
from .services.omdb import OMDbClient
from .views import render_detail, render_error, render_film_table

console = Console()

app = typer.Typer(
    help="Browse the film catalog with aggregated critic ratings.",
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

SORT_SHORTCUTS = {"e": SortKey.EPISODE, "y": SortKey.YEAR, "r": SortKey.RATING}


def get_state(ctx: typer.Context) -> Dict[str, Settings]:
    return ctx.ensure_object(dict)  # type: ignore[return-value]


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to TOML config file."),
) -> None:
    """Application entry point: load configuration."""
    state = get_state(ctx)
    if "settings" not in state:
        settings = load_settings(config_path=config)
        state["settings"] = settings
        telemetry_service.console.log(
            f"Loaded configuration from {config or 'config/default.toml'}", settings.as_dict()
        )


@contextlib.asynccontextmanager
async def open_browser(settings: Settings, *, with_ratings: bool = True) -> AsyncIterator[FilmBrowser]:
    catalog = CatalogClient(settings)
    ratings = OMDbClient(settings) if with_ratings else None
    try:
        yield FilmBrowser(catalog, ratings)
    finally:
        await catalog.aclose()
        if ratings is not None:
            await ratings.aclose()


async def _load(browser: FilmBrowser) -> bool:
    with console.status("Loading films..."):
        with telemetry_service.timed_operation("catalog"):
            await browser.load()
    if browser.state is ViewState.ERROR:
        console.print(render_error(browser))
        return False
    return True


def _require_api_key(settings: Settings) -> None:
    if not settings.omdb.api_key:
        console.print("[red]OMDb API key is not configured.[/red] Set OMDB_API_KEY.")
        raise typer.Exit(code=1)


@app.command("list")
def list_films(
    ctx: typer.Context,
    sort: Optional[SortKey] = typer.Option(None, "--sort", "-s", help="Sort order for the list."),
) -> None:
    """Print the film catalog."""
    settings = get_state(ctx)["settings"]

    async def run() -> bool:
        async with open_browser(settings, with_ratings=False) as browser:
            if not await _load(browser):
                return False
            if sort:
                browser.sort(sort)
            console.print(render_film_table(browser))
            return True

    if not asyncio.run(run()):
        raise typer.Exit(code=1)


@app.command("show")
def show_film(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Episode number or film title."),
) -> None:
    """Show ratings detail for one film."""
    settings = get_state(ctx)["settings"]
    _require_api_key(settings)

    async def run() -> int:
        async with open_browser(settings) as browser:
            if not await _load(browser):
                return 1
            film = browser.find(query)
            if film is None:
                typer.echo(f"Film '{query}' not found.")
                return 1
            with telemetry_service.timed_operation(f"ratings[{film.title}]"):
                await browser.select(film)
            console.print(render_detail(browser))
            return 0

    code = asyncio.run(run())
    if code:
        raise typer.Exit(code=code)


@app.command("browse")
def browse(ctx: typer.Context) -> None:
    """Interactive list/detail browser."""
    settings = get_state(ctx)["settings"]
    _require_api_key(settings)

    async def run() -> int:
        async with open_browser(settings) as browser:
            if not await _load(browser):
                return 1
            while True:
                console.print(render_film_table(browser))
                console.print(render_detail(browser))
                choice = typer.prompt(
                    "Film number, sort [e]pisode/[y]ear/[r]ating, or [q]uit", default="q"
                ).strip().lower()
                if choice == "q":
                    return 0
                if choice in SORT_SHORTCUTS:
                    browser.sort(SORT_SHORTCUTS[choice])
                    continue
                if not choice.isdigit():
                    console.print(f"[yellow]Unrecognised choice[/yellow] '{escape(choice)}'.")
                    continue
                try:
                    with console.status("Loading ratings..."):
                        await browser.select_by_index(int(choice))
                except IndexError as exc:
                    console.print(f"[yellow]{exc}[/yellow]")

    code = asyncio.run(run())
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":  # pragma: no cover
    app()
