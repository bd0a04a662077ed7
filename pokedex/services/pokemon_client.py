"""HTTP access to a PokeAPI-compatible ``/pokemon`` resource."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ValidationError

from pokedex.exceptions import TransportError
from pokedex.schemas.pokemon import (
    PokemonDetailResponse,
    PokemonListResponse,
    PokemonReference,
)
from pokedex.settings import REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

USER_AGENT = "Pokedex-Client/0.1"


@runtime_checkable
class PokemonSourceProtocol(Protocol):
    async def fetch_list(self) -> list[PokemonReference]:
        """Return the raw ``{name, url}`` records of the catalogue page."""

    async def fetch_detail(self, name_or_id: str | int) -> PokemonDetailResponse:
        """Return the raw detail record for a single Pokémon."""


class PokemonClient(PokemonSourceProtocol):
    """Thin async wrapper around :class:`httpx.AsyncClient`.

    Every failure (transport, non-2xx status, undecodable or unexpected
    payload) is logged and re-raised as :class:`TransportError`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        page_limit: int | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._page_limit = page_limit
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT_SECONDS,
            headers={"User-Agent": USER_AGENT},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "PokemonClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_page(
        self, *, limit: int | None = None, offset: int | None = None
    ) -> PokemonListResponse:
        params: dict[str, int] = {}
        effective_limit = limit if limit is not None else self._page_limit
        if effective_limit is not None:
            params["limit"] = effective_limit
        if offset is not None:
            params["offset"] = offset

        payload = await self._get_json(self._base_url, params=params, what="list")
        return self._parse(PokemonListResponse, payload, url=self._base_url, what="list")

    async def fetch_list(self) -> list[PokemonReference]:
        page = await self.fetch_page()
        return page.results

    async def fetch_detail(self, name_or_id: str | int) -> PokemonDetailResponse:
        url = f"{self._base_url}/{name_or_id}"
        payload = await self._get_json(url, what="detail")
        return self._parse(PokemonDetailResponse, payload, url=url, what="detail")

    async def _get_json(
        self, url: str, *, params: dict[str, int] | None = None, what: str
    ) -> Any:
        try:
            response = await self._client.get(
                url, params=params or None, timeout=REQUEST_TIMEOUT_SECONDS
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("Error fetching Pokemon %s from %s: HTTP %s", what, url, status)
            raise TransportError(
                f"Pokemon {what} request failed with HTTP {status}",
                url=url,
                status_code=status,
                detail=str(exc),
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Error fetching Pokemon %s from %s: %s", what, url, exc)
            raise TransportError(
                f"Pokemon {what} request failed", url=url, detail=str(exc)
            ) from exc
        except ValueError as exc:
            logger.error("Error decoding Pokemon %s from %s: %s", what, url, exc)
            raise TransportError(
                f"Pokemon {what} response is not valid JSON", url=url, detail=str(exc)
            ) from exc

    @staticmethod
    def _parse(model: type[BaseModel], payload: Any, *, url: str, what: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.error("Unexpected Pokemon %s payload from %s", what, url)
            raise TransportError(
                f"Pokemon {what} response has an unexpected shape",
                url=url,
                detail=str(exc),
            ) from exc
