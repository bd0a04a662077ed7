"""Wiring helpers that assemble services from :class:`AppSettings`.

Keeping construction here leaves the service modules free of configuration
concerns and gives tests and the CLI one place to build a consistent graph.
"""

from __future__ import annotations

from pokedex.services.favorites_store import FavoritesStore
from pokedex.services.pokemon_client import PokemonClient, PokemonSourceProtocol
from pokedex.services.pokemon_data import PokemonDataService
from pokedex.services.storage import JsonFileStorage, KeyValueStorage
from pokedex.settings import AppSettings


def build_favorites_store(
    settings: AppSettings, *, storage: KeyValueStorage | None = None
) -> FavoritesStore:
    """Create a store over the configured storage and load persisted favorites."""

    store = FavoritesStore(storage or JsonFileStorage(settings.resolved_storage_path))
    store.load_favorites()
    return store


def build_pokemon_client(settings: AppSettings) -> PokemonClient:
    return PokemonClient(settings.poke_api_url, page_limit=settings.page_limit)


def build_pokemon_data_service(
    settings: AppSettings,
    *,
    source: PokemonSourceProtocol | None = None,
    store: FavoritesStore | None = None,
) -> PokemonDataService:
    """Return a fully-wired :class:`PokemonDataService`.

    ``store`` is shared by reference; pass the same instance to every service
    that must agree on favorite flags.
    """

    return PokemonDataService(
        source or build_pokemon_client(settings),
        store or build_favorites_store(settings),
        loading_delay=settings.loading_delay_seconds,
    )
