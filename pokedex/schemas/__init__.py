"""Pydantic schemas for remote payloads and view models."""

from pokedex.schemas.error import (  # noqa: F401
    ErrorDetail,
    ErrorType,
    OperationResult,
)
from pokedex.schemas.pokemon import (  # noqa: F401
    PokemonDetail,
    PokemonDetailResponse,
    PokemonListItem,
    PokemonListResponse,
    PokemonReference,
)
