"""Typed success/failure results returned by the backend services.

Every service call answers with either :class:`Ok` or :class:`Err` instead of a
loose ``{"success": ..., "data": ..., "error": ...}`` dictionary. Callers
branch with ``isinstance`` (or ``result.success``) and never have to guess
which keys are present.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, TypeVar, Union

T = TypeVar("T")

__all__ = ["BackendError", "Err", "Ok", "Result", "from_envelope", "unwrap"]


class BackendError(RuntimeError):
    """Raised when an :class:`Err` result is unwrapped."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T
    success: bool = field(default=True, init=False)

    def to_envelope(self) -> dict:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class Err:
    error: str = ""
    success: bool = field(default=False, init=False)

    def to_envelope(self) -> dict:
        return {"success": False, "error": self.error}


Result = Union[Ok[T], Err]


def from_envelope(envelope: Mapping[str, Any]) -> Result[Any]:
    """Convert a ``{success, data | error}`` mapping into a typed result."""
    if not isinstance(envelope, Mapping) or "success" not in envelope:
        raise TypeError(f"Not a result envelope: {envelope!r}")
    if envelope["success"] is True:
        return Ok(envelope.get("data"))
    if envelope["success"] is False:
        return Err(str(envelope.get("error") or ""))
    raise TypeError(f"Envelope 'success' must be a bool, got {envelope['success']!r}")


def unwrap(result: Result[T], fallback: str = "Request failed") -> T:
    """Return the payload of ``result`` or raise :class:`BackendError`."""
    if isinstance(result, Ok):
        return result.data
    if isinstance(result, Err):
        raise BackendError(result.error or fallback)
    raise TypeError(f"Unexpected result type: {type(result).__name__}")
