"""Centralized configuration management for the Pokédex client."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env file before the settings singleton is instantiated so that
# ``POKE_API`` and friends behave the same whether exported or kept in .env.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_POKE_API_URL = "https://pokeapi.co/api/v2/pokemon"
DEFAULT_STORAGE_PATH = "~/.pokedex/storage.json"
DEFAULT_LOADING_DELAY_SECONDS = 0.5
DEFAULT_LOG_LEVEL = "INFO"
REQUEST_TIMEOUT_SECONDS = 10.0
FAVORITES_STORAGE_KEY = "favoritePokemons"


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Only the remote base URL is meaningful configuration; the remaining values
    tune local persistence, logging, and the cosmetic loading delay.
    """

    _explicit_poke_api: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:  # noqa: D401 - short override explanation
        """Record whether the API base URL was supplied explicitly."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_poke_api = bool(
            {"poke_api_url", "poke_api"} & normalized_keys
        )
        api_env = os.getenv("POKE_API")
        if api_env is not None and api_env.strip():
            self._explicit_poke_api = True

    poke_api_url: str = Field(
        default=DEFAULT_POKE_API_URL,
        alias="POKE_API",
        description="Base URL of the Pokémon resource on a PokeAPI-compatible server.",
    )
    storage_path: Path = Field(
        default=Path(DEFAULT_STORAGE_PATH),
        alias="POKEDEX_STORAGE_PATH",
        description="JSON file used as durable key/value storage for favorites.",
    )
    loading_delay_seconds: float = Field(
        default=DEFAULT_LOADING_DELAY_SECONDS,
        alias="POKEDEX_LOADING_DELAY",
        ge=0.0,
        description=(
            "Delay before the loading flag clears after a list load. Purely"
            " cosmetic; zero clears the flag immediately."
        ),
    )
    page_limit: int | None = Field(
        default=None,
        alias="POKEDEX_PAGE_LIMIT",
        gt=0,
        description="Optional ``limit`` query parameter sent with list requests.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )

    @field_validator("poke_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned:
            raise ValueError("POKE_API must not be empty")
        return cleaned

    @property
    def resolved_storage_path(self) -> Path:
        """Return the storage path with ``~`` expanded."""

        return self.storage_path.expanduser()

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_poke_api and self.poke_api_url == DEFAULT_POKE_API_URL:
            warnings.append(
                f"POKE_API is not set - falling back to the public endpoint {DEFAULT_POKE_API_URL}"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()
