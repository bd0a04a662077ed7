"""Terminal front-end for browsing the catalogue and managing favorites.

Example usage:
    pokedex list --search chu
    pokedex show pikachu
    pokedex favorite pikachu
    pokedex favorites
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from pokedex.schemas.pokemon import PokemonDetail, PokemonListItem
from pokedex.services.dependencies import build_favorites_store
from pokedex.services.favorites_store import FavoritesStore
from pokedex.services.pokemon_client import PokemonClient, PokemonSourceProtocol
from pokedex.services.pokemon_data import PokemonDataService
from pokedex.services.storage import KeyValueStorage
from pokedex.settings import AppSettings, get_settings

console = Console()
logger = logging.getLogger(__name__)

FAVORITE_MARK = "★"


@dataclass
class CliState:
    """Objects shared between the group callback and its commands.

    ``source`` and ``storage`` are normally built from settings; tests inject
    in-memory doubles through ``CliRunner.invoke(obj=...)``.
    """

    settings: AppSettings | None = None
    source: PokemonSourceProtocol | None = None
    storage: KeyValueStorage | None = None

    @property
    def resolved_settings(self) -> AppSettings:
        return self.settings or get_settings()

    def favorites_store(self) -> FavoritesStore:
        return build_favorites_store(self.resolved_settings, storage=self.storage)

    @asynccontextmanager
    async def open_source(self, *, limit: int | None = None) -> AsyncIterator[PokemonSourceProtocol]:
        if self.source is not None:
            yield self.source
            return

        settings = self.resolved_settings
        async with PokemonClient(
            settings.poke_api_url, page_limit=limit or settings.page_limit
        ) as client:
            yield client


def _configure_logging(settings: AppSettings) -> None:
    logging.basicConfig(
        level=settings.log_level_numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for warning in settings.optional_config_warnings():
        logger.warning(warning)


def _render_list(items: list[PokemonListItem], *, total: int) -> None:
    table = Table(title=f"Pokémon ({len(items)}/{total})")
    table.add_column(FAVORITE_MARK, justify="center", style="yellow")
    table.add_column("Name", style="cyan")
    table.add_column("URL", style="dim")
    for item in items:
        table.add_row(FAVORITE_MARK if item.favorite else "", item.name, item.url)
    console.print(table)


def _render_detail(detail: PokemonDetail) -> None:
    status = "[yellow]★ favorite[/yellow]" if detail.favorite else "[dim]not a favorite[/dim]"
    console.print(f"[bold cyan]{detail.name}[/bold cyan]  {status}")
    console.print(f"  Height: {detail.height}")
    console.print(f"  Weight: {detail.weight}")
    console.print(f"  Types: {', '.join(detail.types) or '-'}")
    console.print(f"  Image: {detail.image_url or '-'}")


@click.group()
@click.option("--base-url", default=None, help="Override the POKE_API base URL.")
@click.option(
    "--storage",
    "storage_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Override the favorites storage file.",
)
@click.pass_context
def cli(ctx: click.Context, base_url: str | None, storage_path: Path | None) -> None:
    """Browse Pokémon and manage locally stored favorites."""

    state = ctx.ensure_object(CliState)
    if state.settings is None:
        overrides: dict[str, object] = {}
        if base_url:
            overrides["poke_api_url"] = base_url
        if storage_path is not None:
            overrides["storage_path"] = storage_path
        state.settings = AppSettings(**overrides) if overrides else get_settings()
    _configure_logging(state.settings)


@cli.command(name="list")
@click.option("--search", default="", help="Only show names containing this text.")
@click.option("--favorites-only", is_flag=True, help="Only show favorites.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Page size to request.")
@click.pass_obj
def list_command(state: CliState, search: str, favorites_only: bool, limit: int | None) -> None:
    """List the catalogue with favorite markers."""

    async def run() -> PokemonDataService:
        store = state.favorites_store()
        store.set_search_text(search)
        async with state.open_source(limit=limit) as source:
            service = PokemonDataService(source, store, loading_delay=0)
            await service.load_list()
        return service

    service = asyncio.run(run())
    if service.last_error:
        raise click.ClickException(service.last_error)

    visible = service.visible_items(favorites_only=favorites_only)
    if not visible:
        console.print("[yellow]No Pokémon match the current filters[/yellow]")
        return
    _render_list(visible, total=len(service.items))


@cli.command()
@click.argument("name")
@click.pass_obj
def show(state: CliState, name: str) -> None:
    """Show height, weight, types and artwork for NAME."""

    async def run() -> PokemonDataService:
        async with state.open_source() as source:
            service = PokemonDataService(source, state.favorites_store(), loading_delay=0)
            await service.load_detail(name.strip().lower())
        return service

    service = asyncio.run(run())
    if service.selected is None:
        raise click.ClickException(service.last_error or f"No details for {name}")
    _render_detail(service.selected)


@cli.command()
@click.argument("name")
@click.pass_obj
def favorite(state: CliState, name: str) -> None:
    """Toggle NAME in the favorites list."""

    store = state.favorites_store()
    normalized = name.strip().lower()
    if store.toggle_favorite(normalized):
        console.print(f"[green]★ {normalized} added to favorites[/green]")
    else:
        console.print(f"[yellow]{normalized} removed from favorites[/yellow]")


@cli.command()
@click.pass_obj
def favorites(state: CliState) -> None:
    """Print the stored favorites."""

    store = state.favorites_store()
    if store.favorite_count() == 0:
        console.print("[dim]No favorites yet[/dim]")
        return
    console.print(f"[bold]Favorites ({store.favorite_count()}):[/bold]")
    for name in store.favorites:
        console.print(f"  {FAVORITE_MARK} {name}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
