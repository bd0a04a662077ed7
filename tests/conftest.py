"""Pytest configuration helpers for the Pokédex client.

``pytest`` imports ``tests.conftest`` automatically, which puts the repository
root on ``sys.path`` before test modules import application code.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

import pytest

from pokedex.services.favorites_store import FavoritesStore
from pokedex.services.storage import MemoryStorage
from tests import _ensure_repo_on_path
from tests.support.fake_sources import InMemoryPokemonSource, sample_detail_payload


class _AsyncioCompatPlugin:
    """Minimal fallback runner for ``async def`` tests."""

    def pytest_pyfunc_call(self, pyfuncitem: Any) -> bool | None:
        """Run coroutine tests via :func:`asyncio.run` when ``pytest-asyncio`` is absent."""

        test_function = pyfuncitem.obj
        if inspect.iscoroutinefunction(test_function):
            argnames = pyfuncitem._fixtureinfo.argnames
            kwargs = {name: pyfuncitem.funcargs[name] for name in argnames}
            asyncio.run(test_function(**kwargs))
            return True
        return None


def pytest_configure(config: pytest.Config) -> None:
    """Hook executed by pytest prior to running any tests."""

    _ensure_repo_on_path()

    # ``pytest-asyncio`` registers itself under the ``asyncio`` plugin name; keep
    # async tests working in lean environments where it is missing.
    if not config.pluginmanager.hasplugin("asyncio"):
        config.addinivalue_line(
            "markers",
            "asyncio: fallback marker handled by tests.conftest when pytest-asyncio is absent",
        )
        config.pluginmanager.register(_AsyncioCompatPlugin(), name="asyncio_compat")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> FavoritesStore:
    return FavoritesStore(storage)


@pytest.fixture
def source() -> InMemoryPokemonSource:
    """Source serving pikachu and bulbasaur, matching the documented examples."""

    return InMemoryPokemonSource(
        records=[
            {"name": "pikachu", "url": "u1"},
            {"name": "bulbasaur", "url": "u2"},
        ],
        details={
            "pikachu": sample_detail_payload(),
            "bulbasaur": sample_detail_payload(
                name="bulbasaur",
                height=7,
                weight=69,
                image_url="bulba.png",
                types=["grass", "poison"],
            ),
        },
    )
