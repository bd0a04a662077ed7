"""Error payloads returned to callers instead of raised exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from pokedex.exceptions import MalformedStorageError, PokedexError, TransportError

T = TypeVar("T")


class ErrorType(str, Enum):
    """Types of errors the data-access layer reports."""

    NETWORK_ERROR = "network_error"
    STORAGE_ERROR = "storage_error"
    VALIDATION_ERROR = "validation_error"


class ErrorDetail(BaseModel):
    """Standardized error description handed back to the front-end."""

    error_type: ErrorType = Field(..., description="Category of error")
    message: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(None, description="Underlying cause, when known")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When the error occurred"
    )

    @classmethod
    def from_exception(cls, message: str, exc: PokedexError) -> "ErrorDetail":
        """Build a payload whose category mirrors the exception type."""

        if isinstance(exc, TransportError):
            error_type = ErrorType.NETWORK_ERROR
        elif isinstance(exc, MalformedStorageError):
            error_type = ErrorType.STORAGE_ERROR
        else:
            error_type = ErrorType.VALIDATION_ERROR
        return cls(error_type=error_type, message=message, detail=exc.detail or exc.message)


@dataclass(slots=True)
class OperationResult(Generic[T]):
    """Outcome of a service operation.

    ``value`` is returned by reference, so a detail result shares identity with
    the service's ``selected`` model. ``stale`` marks a response that arrived
    after a newer request superseded it.
    """

    value: T | None = None
    error: ErrorDetail | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale
