"""Shared plumbing for the Supabase-backed services."""
from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError

from aikinote.cache import QueryCache
from aikinote.result import Err, Ok, Result
from aikinote.utils.supa import format_api_error

T = TypeVar("T")


class SupabaseService:
    """Base class holding the injected client and optional query cache."""

    log_prefix = "service"

    def __init__(self, client: Any, *, cache: Optional[QueryCache] = None) -> None:
        if client is None:
            raise RuntimeError("Supabase client not configured")
        self.client = client
        self.cache = cache

    def _table(self, name: str):
        return self.client.table(name)

    def _guarded(self, context: str, fn: Callable[[], T]) -> Result[T]:
        """Run ``fn`` and convert expected failures into :class:`Err`."""
        try:
            return Ok(fn())
        except APIError as exc:
            message = format_api_error(context, exc)
        except httpx.HTTPError as exc:
            message = f"{context}: {exc}"
        except (RuntimeError, ValueError) as exc:
            message = str(exc)
        print(f"[{self.log_prefix}] {message}")
        return Err(message)

    def _cached(
        self,
        scope: str,
        params: Any,
        ttl: float,
        loader: Callable[[], Result[T]],
    ) -> Result[T]:
        if self.cache is None:
            return loader()
        return self.cache.get_or_load(scope, params, ttl, loader)

    def _invalidate(self, scopes: Iterable[str]) -> None:
        if self.cache is not None:
            self.cache.invalidate(scopes)


__all__ = ["SupabaseService"]
