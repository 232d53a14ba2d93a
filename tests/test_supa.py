import httpx
import pytest

from aikinote.utils import supa
from aikinote.utils.supa import SupabaseConfigError, SupabaseConnectionError, first_row


def test_first_row_basic():
    class Resp:
        def __init__(self, data):
            self.data = data
    assert first_row(Resp([{"a": 1}])) == {"a": 1}
    assert first_row(Resp([])) is None
    assert first_row(None) is None


def test_create_supabase_client_requires_credentials():
    with pytest.raises(SupabaseConfigError):
        supa.create_supabase_client("", "anon-key")


def test_create_supabase_client_http_status_error(monkeypatch):
    request = httpx.Request("GET", "https://example.supabase.co")
    response = httpx.Response(404, request=request, text="Not Found")

    def _raise_http_status(*args, **kwargs):  # pragma: no cover - helper for test
        raise httpx.HTTPStatusError("not found", request=request, response=response)

    monkeypatch.setattr(supa, "create_client", _raise_http_status)

    with pytest.raises(SupabaseConfigError) as excinfo:
        supa.create_supabase_client("https://example.supabase.co", "anon-key")

    assert "HTTP 404" in str(excinfo.value)


def test_create_supabase_client_connection_error(monkeypatch):
    def _raise_connect(*args, **kwargs):  # pragma: no cover - helper for test
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(supa, "create_client", _raise_connect)

    with pytest.raises(SupabaseConnectionError):
        supa.create_supabase_client("https://example.supabase.co", "anon-key")


def test_format_api_error_joins_details_and_hint():
    class FakeError(Exception):
        message = "duplicate key"
        details = "Key (name) exists"
        hint = "pick another name"

    assert supa.format_api_error("create_tag", FakeError()) == (
        "create_tag: duplicate key | Key (name) exists | pick another name"
    )
