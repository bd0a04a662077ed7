"""Explicit subscription mechanism standing in for framework reactivity.

State objects call :meth:`ChangeNotifier.notify` with the name of the field
that changed; subscribers re-read whatever state they render.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

__all__ = ["ChangeCallback", "ChangeNotifier"]

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str], None]


class ChangeNotifier:
    def __init__(self) -> None:
        self._subscribers: list[ChangeCallback] = []

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""

        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify(self, field: str) -> None:
        # Iterate over a copy so callbacks may unsubscribe themselves.
        for callback in list(self._subscribers):
            try:
                callback(field)
            except Exception:
                logger.exception("Change subscriber failed for field %s", field)
