"""Unit tests for the favorites store and its write-through persistence."""

from __future__ import annotations

import json
import logging

import pytest

from pokedex.exceptions import MalformedStorageError
from pokedex.services.favorites_store import FavoritesStore, decode_favorites
from pokedex.services.storage import MemoryStorage
from pokedex.settings import FAVORITES_STORAGE_KEY


class FailingStorage(MemoryStorage):
    """Storage whose writes always fail, like a full or read-only disk."""

    def set_item(self, key: str, value: str) -> None:
        raise OSError("disk full")


@pytest.mark.parametrize("times", [1, 2, 3, 4, 7])
def test_toggle_parity(store: FavoritesStore, times: int) -> None:
    """Odd toggle counts end as favorite, even counts return to not-favorite."""

    for _ in range(times):
        store.toggle_favorite("pikachu")

    assert store.is_favorite("pikachu") is (times % 2 == 1)


def test_toggle_returns_membership_and_counts(store: FavoritesStore) -> None:
    assert store.toggle_favorite("pikachu") is True
    assert store.toggle_favorite("eevee") is True
    assert store.favorite_count() == 2

    assert store.toggle_favorite("pikachu") is False
    assert store.favorite_count() == 1
    assert store.favorites == ("eevee",)


def test_every_toggle_rewrites_storage(store: FavoritesStore, storage: MemoryStorage) -> None:
    store.toggle_favorite("pikachu")
    assert json.loads(storage.get_item(FAVORITES_STORAGE_KEY)) == ["pikachu"]

    store.toggle_favorite("bulbasaur")
    assert json.loads(storage.get_item(FAVORITES_STORAGE_KEY)) == ["pikachu", "bulbasaur"]

    store.toggle_favorite("pikachu")
    assert json.loads(storage.get_item(FAVORITES_STORAGE_KEY)) == ["bulbasaur"]


def test_favorites_round_trip_across_sessions(storage: MemoryStorage) -> None:
    """A new store over the same storage reproduces the previous session's set."""

    first = FavoritesStore(storage)
    for name in ("pikachu", "mew", "onix", "mew", "snorlax"):
        first.toggle_favorite(name)

    second = FavoritesStore(storage)
    second.load_favorites()

    assert second.favorites == first.favorites == ("pikachu", "onix", "snorlax")


def test_load_without_stored_key_keeps_empty_set(store: FavoritesStore) -> None:
    store.load_favorites()

    assert store.favorite_count() == 0


def test_load_collapses_duplicate_names() -> None:
    storage = MemoryStorage({FAVORITES_STORAGE_KEY: '["mew", "mew", "ditto"]'})
    store = FavoritesStore(storage)

    store.load_favorites()

    assert store.favorites == ("mew", "ditto")


@pytest.mark.parametrize(
    "raw",
    ["{not json", '{"favorites": ["mew"]}', '["mew", 3]', "null"],
)
def test_malformed_storage_fails_safe_to_empty(
    raw: str, caplog: pytest.LogCaptureFixture
) -> None:
    storage = MemoryStorage({FAVORITES_STORAGE_KEY: raw})
    store = FavoritesStore(storage, initial=["pikachu"])

    with caplog.at_level(logging.WARNING):
        store.load_favorites()

    assert store.favorite_count() == 0
    assert "Ignoring malformed favorites" in caplog.text


def test_decode_favorites_raises_typed_error() -> None:
    with pytest.raises(MalformedStorageError) as excinfo:
        decode_favorites("[1, 2]")

    assert excinfo.value.key == FAVORITES_STORAGE_KEY


def test_failed_write_keeps_in_memory_toggle(caplog: pytest.LogCaptureFixture) -> None:
    store = FavoritesStore(FailingStorage())

    with caplog.at_level(logging.WARNING):
        result = store.toggle_favorite("pikachu")

    assert result is True
    assert store.is_favorite("pikachu")
    assert "Could not persist favorites" in caplog.text


def test_search_text_notifies_only_on_change(store: FavoritesStore) -> None:
    events: list[str] = []
    store.subscribe(events.append)

    store.set_search_text("pika")
    store.set_search_text("pika")
    store.set_search_text("")

    assert store.search_text == ""
    assert events == ["search_text", "search_text"]


def test_toggle_notifies_subscribers(store: FavoritesStore) -> None:
    events: list[str] = []
    unsubscribe = store.subscribe(events.append)

    store.toggle_favorite("pikachu")
    unsubscribe()
    store.toggle_favorite("pikachu")

    assert events == ["favorites"]
