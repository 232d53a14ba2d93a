"""Per-session wiring of configuration, Supabase client, cache and services.

Everything a view needs is built once by :func:`build_context` and passed
around explicitly. In the Streamlit app :func:`session_context` keeps one
context per browser session, so auth state never leaks between users.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

import streamlit as st

from aikinote.cache import QueryCache
from aikinote.config import AppConfig, describe, load_config
from aikinote.services import ProfileService, TagService, TrainingPagesService
from aikinote.sync import TrainingPagesStore
from aikinote.utils.supa import create_supabase_client

_CONTEXT_KEY = "aikinote_context"


@dataclass
class AppContext:
    config: AppConfig
    client: Any
    cache: QueryCache
    pages: TrainingPagesService
    tags: TagService
    profile: ProfileService

    def new_store(self, notify: Callable[[str], None]) -> TrainingPagesStore:
        return TrainingPagesStore(
            self.pages,
            notify=notify,
            locale=self.config.locale,
            timezone=self.config.timezone,
            batch_size=self.config.fetch_batch_size,
        )


def build_context(config: AppConfig, client: Optional[Any] = None) -> AppContext:
    """Create the client (unless given), one shared cache and the services."""
    if client is None:
        client = create_supabase_client(config.supabase_url, config.supabase_anon_key)
    cache = QueryCache()
    return AppContext(
        config=config,
        client=client,
        cache=cache,
        pages=TrainingPagesService(client, cache=cache),
        tags=TagService(client, cache=cache),
        profile=ProfileService(client, cache=cache),
    )


def session_context() -> AppContext:
    """Return this browser session's context, building it on first use."""
    ctx = st.session_state.get(_CONTEXT_KEY)
    if ctx is None:
        config = load_config()
        print(f"[context] Starting session with {describe(config)}")
        ctx = build_context(config)
        st.session_state[_CONTEXT_KEY] = ctx
    return ctx


__all__ = ["AppContext", "build_context", "session_context"]
