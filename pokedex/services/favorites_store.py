"""Authoritative favorites state plus the transient catalogue search text.

The store is constructed explicitly and shared by reference with every
service that needs it. Membership lives in memory; each toggle rewrites the
full set to durable storage as a JSON array under ``favoritePokemons``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable

from pokedex.exceptions import MalformedStorageError
from pokedex.services.storage import KeyValueStorage
from pokedex.settings import FAVORITES_STORAGE_KEY
from pokedex.utils.change_notifier import ChangeCallback, ChangeNotifier

logger = logging.getLogger(__name__)


def decode_favorites(raw: str, *, key: str = FAVORITES_STORAGE_KEY) -> list[str]:
    """Parse a stored favorites payload into a list of names.

    Raises :class:`MalformedStorageError` unless ``raw`` is a JSON array of
    strings.
    """

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedStorageError(
            "Stored favorites are not valid JSON", key=key, detail=str(exc)
        ) from exc

    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise MalformedStorageError(
            "Stored favorites must be a JSON array of strings",
            key=key,
            detail=type(data).__name__,
        )
    return data


class FavoritesStore:
    """Set of favorite Pokémon names with write-through persistence."""

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        storage_key: str = FAVORITES_STORAGE_KEY,
        initial: Iterable[str] = (),
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        # dict keys give O(1) membership while keeping insertion order for the
        # serialised array.
        self._favorites: dict[str, None] = dict.fromkeys(initial)
        self._search_text = ""
        self._notifier = ChangeNotifier()

    @property
    def favorites(self) -> tuple[str, ...]:
        return tuple(self._favorites)

    @property
    def search_text(self) -> str:
        return self._search_text

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        return self._notifier.subscribe(callback)

    def is_favorite(self, name: str) -> bool:
        return name in self._favorites

    def favorite_count(self) -> int:
        return len(self._favorites)

    def toggle_favorite(self, name: str) -> bool:
        """Flip membership of ``name`` and persist the whole set.

        The in-memory change always stands; a failed storage write is logged
        and otherwise ignored. Returns the new membership.
        """

        if name in self._favorites:
            del self._favorites[name]
            is_favorite = False
        else:
            self._favorites[name] = None
            is_favorite = True

        self._persist()
        self._notifier.notify("favorites")
        return is_favorite

    def load_favorites(self) -> None:
        """Replace the in-memory set with the stored one.

        A missing key leaves the set untouched. Malformed or unreadable
        storage resets the set to empty and logs a warning instead of raising.
        """

        try:
            raw = self._storage.get_item(self._storage_key)
            if raw is None:
                return
            names = decode_favorites(raw, key=self._storage_key)
        except MalformedStorageError as exc:
            logger.warning(
                "Ignoring malformed favorites under %s: %s (%s)",
                exc.key,
                exc.message,
                exc.detail,
            )
            names = []
        except OSError as exc:
            logger.warning("Could not read favorites under %s: %s", self._storage_key, exc)
            names = []

        self._favorites = dict.fromkeys(names)
        self._notifier.notify("favorites")

    def set_search_text(self, value: str) -> None:
        if self._search_text == value:
            return
        self._search_text = value
        logger.debug("Search text updated: %r", value)
        self._notifier.notify("search_text")

    def _persist(self) -> None:
        payload = json.dumps(list(self._favorites), ensure_ascii=False)
        try:
            self._storage.set_item(self._storage_key, payload)
        except (OSError, MalformedStorageError) as exc:
            logger.warning("Could not persist favorites under %s: %s", self._storage_key, exc)
