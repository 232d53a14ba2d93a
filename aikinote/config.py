"""Application configuration.

Values come from Streamlit secrets first::

    [supabase]
    url = "https://<project>.supabase.co"
    anon_key = "..."

    [aikinote]
    locale = "ja"
    timezone = "Asia/Tokyo"
    search_debounce_ms = 300

and fall back to the ``SUPABASE_URL``, ``SUPABASE_ANON_KEY``,
``AIKINOTE_LOCALE``, ``AIKINOTE_TIMEZONE`` and ``AIKINOTE_DEBOUNCE_MS``
environment variables.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import streamlit as st

from aikinote.messages import DEFAULT_LOCALE
from aikinote.time_utils import DEFAULT_TZ
from aikinote.utils.supa import MISSING_CONFIG_MSG, SupabaseConfigError

PAGE_SIZE = 25
FETCH_BATCH_SIZE = 100
SEARCH_DEBOUNCE_MS = 300


@dataclass(frozen=True)
class AppConfig:
    supabase_url: str
    supabase_anon_key: str
    locale: str = DEFAULT_LOCALE
    timezone: str = DEFAULT_TZ
    search_debounce_ms: int = SEARCH_DEBOUNCE_MS
    page_size: int = PAGE_SIZE
    fetch_batch_size: int = FETCH_BATCH_SIZE


def _secrets_section(name: str) -> Mapping[str, Any]:
    try:
        section = st.secrets.get(name)
    except Exception:  # no secrets.toml; env vars take over
        return {}
    return section if isinstance(section, Mapping) else {}


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def load_config(
    env: Optional[Mapping[str, str]] = None,
    secrets: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> AppConfig:
    """Build an :class:`AppConfig` from secrets and environment variables.

    ``env`` and ``secrets`` default to ``os.environ`` and ``st.secrets``.
    """
    env = os.environ if env is None else env
    if secrets is None:
        supabase_cfg = _secrets_section("supabase")
        app_cfg = _secrets_section("aikinote")
    else:
        supabase_cfg = secrets.get("supabase") or {}
        app_cfg = secrets.get("aikinote") or {}

    url = supabase_cfg.get("url") or env.get("SUPABASE_URL")
    key = supabase_cfg.get("anon_key") or env.get("SUPABASE_ANON_KEY")
    if not url or not key:
        raise SupabaseConfigError(MISSING_CONFIG_MSG)

    return AppConfig(
        supabase_url=str(url),
        supabase_anon_key=str(key),
        locale=str(app_cfg.get("locale") or env.get("AIKINOTE_LOCALE") or DEFAULT_LOCALE),
        timezone=str(app_cfg.get("timezone") or env.get("AIKINOTE_TIMEZONE") or DEFAULT_TZ),
        search_debounce_ms=_as_int(
            app_cfg.get("search_debounce_ms", env.get("AIKINOTE_DEBOUNCE_MS")),
            SEARCH_DEBOUNCE_MS,
        ),
    )


def describe(config: AppConfig) -> Dict[str, Any]:
    """Config snapshot safe to print (no keys)."""
    return {
        "supabase_url": config.supabase_url,
        "locale": config.locale,
        "timezone": config.timezone,
        "search_debounce_ms": config.search_debounce_ms,
    }


__all__ = [
    "AppConfig",
    "FETCH_BATCH_SIZE",
    "PAGE_SIZE",
    "SEARCH_DEBOUNCE_MS",
    "describe",
    "load_config",
]
