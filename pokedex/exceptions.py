"""Exception taxonomy shared by the Pokédex services."""

from __future__ import annotations

__all__ = [
    "PokedexError",
    "TransportError",
    "MalformedStorageError",
]


class PokedexError(Exception):
    """Base class for failures raised by the data-access layer."""

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class TransportError(PokedexError):
    """Network, HTTP status, or payload failure talking to the remote API."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.url = url
        self.status_code = status_code


class MalformedStorageError(PokedexError):
    """Durable storage holds data that cannot be decoded."""

    def __init__(self, message: str, *, key: str, detail: str | None = None) -> None:
        super().__init__(message, detail=detail)
        self.key = key
