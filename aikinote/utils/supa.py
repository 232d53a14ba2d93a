"""Supabase client construction.

Clients are built explicitly from an :class:`aikinote.config.AppConfig` (or a
raw URL/key pair) and handed to the services that need them; nothing here
keeps a module-level client around.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from supabase import Client, ClientOptions, SupabaseException, create_client


class SupabaseConfigError(RuntimeError):
    """Raised when Supabase credentials are missing from secrets or env."""


class SupabaseConnectionError(RuntimeError):
    """Raised when the client cannot reach Supabase within the timeout window."""


MISSING_CONFIG_MSG = (
    "Supabase secrets missing. Add `[supabase].url` and `[supabase].anon_key` to "
    "`.streamlit/secrets.toml` or set SUPABASE_URL and SUPABASE_ANON_KEY environment "
    "variables."
)

HTTP_TIMEOUT = httpx.Timeout(10.0, connect=5.0)


def _build_client_options() -> ClientOptions:
    """Return Supabase client options with tighter HTTP timeouts."""

    return ClientOptions(
        httpx_client=httpx.Client(timeout=HTTP_TIMEOUT),
        postgrest_client_timeout=HTTP_TIMEOUT,
        storage_client_timeout=HTTP_TIMEOUT,
        function_client_timeout=HTTP_TIMEOUT,
    )


def _close_options(options: ClientOptions) -> None:
    client = getattr(options, "httpx_client", None)
    if client is not None:
        client.close()


def _response_preview(response: Optional[httpx.Response]) -> str:
    if response is None:
        return ""
    try:
        return response.text.strip().replace("\n", " ")[:200]
    except httpx.ResponseNotRead:
        return ""


def create_supabase_client(url: str, key: str) -> Client:
    """Create a new Supabase client for ``url``/``key``.

    Raises :class:`SupabaseConfigError` for bad credentials and
    :class:`SupabaseConnectionError` when Supabase cannot be reached.
    """
    if not url or not key:
        raise SupabaseConfigError(MISSING_CONFIG_MSG)

    options = _build_client_options()
    try:
        return create_client(url, key, options=options)
    except SupabaseException as exc:
        _close_options(options)
        raise SupabaseConfigError(str(exc) or MISSING_CONFIG_MSG) from exc
    except httpx.HTTPStatusError as exc:
        _close_options(options)
        status = exc.response.status_code if exc.response is not None else "unknown"
        print(f"[supa] HTTP {status} while creating client: {_response_preview(exc.response) or exc}")
        raise SupabaseConfigError(
            f"Supabase responded with HTTP {status}. Check SUPABASE_URL and SUPABASE_ANON_KEY "
            "(or the [supabase] section of .streamlit/secrets.toml)."
        ) from exc
    except httpx.HTTPError as exc:
        _close_options(options)
        print(f"[supa] Connection failed: {exc}")
        raise SupabaseConnectionError(
            "Supabase could not be reached. Check the network connection and retry."
        ) from exc


def first_row(rows: Any) -> Optional[Dict[str, Any]]:
    """
    PostgREST Python client returns `.data` as list-like.
    Return the first dict or None.
    """
    if rows is None:
        return None
    data = getattr(rows, "data", rows)
    if isinstance(data, list) and data:
        first = data[0]
        return first if isinstance(first, dict) else None
    return None


def format_api_error(context: str, exc: Exception) -> str:
    """Flatten a PostgREST error into ``context: message | details | hint``."""
    message = getattr(exc, "message", None) or str(exc)
    hint = getattr(exc, "hint", "")
    details = getattr(exc, "details", "")
    parts = [f"{context}: {message}"]
    if details:
        parts.append(str(details))
    if hint:
        parts.append(str(hint))
    return " | ".join(parts)


__all__ = [
    "HTTP_TIMEOUT",
    "MISSING_CONFIG_MSG",
    "SupabaseConfigError",
    "SupabaseConnectionError",
    "create_supabase_client",
    "first_row",
    "format_api_error",
]
