"""Pokémon catalogue client with locally persisted favorites."""

__version__ = "0.1.0"
