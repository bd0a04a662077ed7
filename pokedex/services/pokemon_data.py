"""View-model service bridging the remote catalogue and the favorites store.

Persistence-free state owned by :class:`PokemonDataService`:
* ``items`` – catalogue rows, replaced wholesale on every successful load.
* ``selected`` – the single detail model, updated field-by-field so existing
  references stay live.
* ``is_loading`` / ``last_error`` – status flags for the front-end.

Every favorite flag is derived from :class:`FavoritesStore`; after
:meth:`PokemonDataService.toggle_favorite` returns, matching rows and the
selected detail already agree with the store.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pokedex.exceptions import TransportError
from pokedex.schemas.error import ErrorDetail, OperationResult
from pokedex.schemas.pokemon import (
    PokemonDetail,
    PokemonDetailResponse,
    PokemonListItem,
)
from pokedex.services.favorites_store import FavoritesStore
from pokedex.services.pokemon_client import PokemonSourceProtocol
from pokedex.settings import DEFAULT_LOADING_DELAY_SECONDS
from pokedex.utils.change_notifier import ChangeCallback, ChangeNotifier

logger = logging.getLogger(__name__)

LIST_ERROR_MESSAGE = "Error loading the Pokémon list"
DETAIL_ERROR_TEMPLATE = "Error loading the details of {name}"


class PokemonDataService:
    """Orchestrates remote fetches and favorites into list and detail models."""

    def __init__(
        self,
        source: PokemonSourceProtocol,
        store: FavoritesStore,
        *,
        loading_delay: float = DEFAULT_LOADING_DELAY_SECONDS,
    ) -> None:
        if loading_delay < 0:
            raise ValueError("loading_delay must be non-negative")
        self._source = source
        self._store = store
        self._loading_delay = loading_delay
        self._notifier = ChangeNotifier()

        self._items: list[PokemonListItem] = []
        self._selected: PokemonDetail | None = None
        self._is_loading = False
        self._last_error: str | None = None

        self._loading_handle: asyncio.TimerHandle | None = None
        self._list_sequence = 0
        self._detail_sequence = 0

    # -- state -----------------------------------------------------------------

    @property
    def items(self) -> list[PokemonListItem]:
        return self._items

    @property
    def selected(self) -> PokemonDetail | None:
        return self._selected

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def store(self) -> FavoritesStore:
        return self._store

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        return self._notifier.subscribe(callback)

    def visible_items(self, *, favorites_only: bool = False) -> list[PokemonListItem]:
        """Return rows matching the store's search text, optionally favorites only."""

        needle = self._store.search_text.strip().lower()
        return [
            item
            for item in self._items
            if needle in item.name.lower() and (item.favorite or not favorites_only)
        ]

    # -- operations ------------------------------------------------------------

    async def load_list(self) -> OperationResult[list[PokemonListItem]]:
        self._list_sequence += 1
        sequence = self._list_sequence
        self._cancel_pending_loading_clear()
        self._set_loading(True)
        self._set_last_error(None)

        try:
            records = await self._source.fetch_list()
        except TransportError as exc:
            logger.debug("List load failed: %s", exc.message)
            self._set_last_error(LIST_ERROR_MESSAGE)
            return OperationResult(error=ErrorDetail.from_exception(LIST_ERROR_MESSAGE, exc))
        else:
            self._items = [
                PokemonListItem(
                    name=record.name,
                    url=record.url,
                    favorite=self._store.is_favorite(record.name),
                )
                for record in records
            ]
            self._notifier.notify("items")
            return OperationResult(value=self._items)
        finally:
            # Only the most recent list load owns the loading flag.
            if sequence == self._list_sequence:
                self._schedule_loading_clear()

    async def load_detail(self, name: str) -> OperationResult[PokemonDetail]:
        self._detail_sequence += 1
        sequence = self._detail_sequence

        try:
            response = await self._source.fetch_detail(name)
        except TransportError as exc:
            if sequence != self._detail_sequence:
                logger.debug("Dropping failed detail response for %s (superseded)", name)
                return OperationResult(stale=True)
            message = DETAIL_ERROR_TEMPLATE.format(name=name)
            logger.debug("Detail load failed for %s: %s", name, exc.message)
            self._set_last_error(message)
            return OperationResult(error=ErrorDetail.from_exception(message, exc))

        if sequence != self._detail_sequence:
            logger.debug("Dropping detail response for %s (superseded)", name)
            return OperationResult(stale=True)

        self._apply_detail(response, favorite=self._store.is_favorite(name))
        return OperationResult(value=self._selected)

    def toggle_favorite(self, name: str) -> bool:
        is_favorite = self._store.toggle_favorite(name)

        items_changed = False
        for item in self._items:
            if item.name == name:
                item.favorite = is_favorite
                items_changed = True
        if items_changed:
            self._notifier.notify("items")

        if self._selected is not None and self._selected.name == name:
            self._selected.favorite = is_favorite
            self._notifier.notify("selected")

        return is_favorite

    # -- internals -------------------------------------------------------------

    def _apply_detail(self, response: PokemonDetailResponse, *, favorite: bool) -> None:
        fields = {
            "name": response.name,
            "height": response.height,
            "weight": response.weight,
            "image_url": response.official_artwork_url,
            "types": response.type_names,
            "favorite": favorite,
        }
        if self._selected is None:
            self._selected = PokemonDetail(**fields)
        else:
            # In-place assignment keeps the object identity observers hold.
            for field_name, value in fields.items():
                setattr(self._selected, field_name, value)
        self._notifier.notify("selected")

    def _set_loading(self, value: bool) -> None:
        if self._is_loading != value:
            self._is_loading = value
            self._notifier.notify("is_loading")

    def _set_last_error(self, value: str | None) -> None:
        if self._last_error != value:
            self._last_error = value
            self._notifier.notify("last_error")

    def _schedule_loading_clear(self) -> None:
        if self._loading_delay == 0:
            self._set_loading(False)
            return
        loop = asyncio.get_running_loop()
        self._loading_handle = loop.call_later(self._loading_delay, self._clear_loading)

    def _clear_loading(self) -> None:
        self._loading_handle = None
        self._set_loading(False)

    def _cancel_pending_loading_clear(self) -> None:
        if self._loading_handle is not None:
            self._loading_handle.cancel()
            self._loading_handle = None
