import pytest

from aikinote.config import (
    FETCH_BATCH_SIZE,
    PAGE_SIZE,
    SEARCH_DEBOUNCE_MS,
    describe,
    load_config,
)
from aikinote.utils.supa import SupabaseConfigError


def test_secrets_take_precedence_over_env():
    config = load_config(
        env={"SUPABASE_URL": "https://env.supabase.co", "SUPABASE_ANON_KEY": "env-key"},
        secrets={
            "supabase": {"url": "https://secret.supabase.co", "anon_key": "secret-key"},
            "aikinote": {"locale": "en", "search_debounce_ms": 150},
        },
    )
    assert config.supabase_url == "https://secret.supabase.co"
    assert config.supabase_anon_key == "secret-key"
    assert config.locale == "en"
    assert config.search_debounce_ms == 150


def test_env_fallback_and_defaults():
    config = load_config(
        env={
            "SUPABASE_URL": "https://env.supabase.co",
            "SUPABASE_ANON_KEY": "env-key",
            "AIKINOTE_TIMEZONE": "Europe/Helsinki",
            "AIKINOTE_DEBOUNCE_MS": "not-a-number",
        },
        secrets={},
    )
    assert config.supabase_url == "https://env.supabase.co"
    assert config.timezone == "Europe/Helsinki"
    assert config.locale == "ja"
    assert config.search_debounce_ms == SEARCH_DEBOUNCE_MS
    assert config.page_size == PAGE_SIZE
    assert config.fetch_batch_size == FETCH_BATCH_SIZE


def test_missing_credentials_raise():
    with pytest.raises(SupabaseConfigError):
        load_config(env={"SUPABASE_URL": "https://env.supabase.co"}, secrets={})


def test_describe_hides_the_key():
    config = load_config(
        env={"SUPABASE_URL": "https://env.supabase.co", "SUPABASE_ANON_KEY": "env-key"},
        secrets={},
    )
    assert "env-key" not in str(describe(config))
