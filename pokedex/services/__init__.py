"""Data-access services: remote source, durable storage, favorites, view models."""

from .favorites_store import FavoritesStore
from .pokemon_client import PokemonClient, PokemonSourceProtocol
from .pokemon_data import PokemonDataService
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage

__all__ = [
    "FavoritesStore",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PokemonClient",
    "PokemonDataService",
    "PokemonSourceProtocol",
]
