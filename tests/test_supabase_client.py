from types import SimpleNamespace

import pytest

from aikinote import supabase_client


class FakeAuth:
    def __init__(self, session=None):
        self.session = session
        self.signed_out = False
        self.set_calls = []

    def get_session(self):
        return self.session

    def set_session(self, access_token, refresh_token):
        self.set_calls.append((access_token, refresh_token))
        self.session = {"access_token": access_token, "refresh_token": refresh_token,
                        "user": {"id": "u1"}}
        return SimpleNamespace(session=self.session, user={"id": "u1"})

    def sign_in_with_password(self, credentials):
        if credentials["password"] != "secret":
            return SimpleNamespace(session=None, user=None)
        self.session = SimpleNamespace(
            access_token="at", refresh_token="rt", user={"id": "u1", "email": credentials["email"]}
        )
        return SimpleNamespace(session=self.session, user=self.session.user)

    def sign_out(self):
        self.signed_out = True
        self.session = None


@pytest.fixture
def state(monkeypatch):
    fake_st = SimpleNamespace(session_state={})
    monkeypatch.setattr(supabase_client, "st", fake_st)
    return fake_st.session_state


def test_session_value_reads_objects_and_dicts():
    assert supabase_client.session_value({"a": 1}, "a") == 1
    assert supabase_client.session_value(SimpleNamespace(a=2), "a") == 2
    assert supabase_client.session_value(None, "a") is None


def test_sign_in_stores_tokens_and_user(state):
    client = SimpleNamespace(auth=FakeAuth())
    supabase_client.sign_in(client, "a@b.c", "secret")
    assert state["supabase_session"] == {"access_token": "at", "refresh_token": "rt"}
    assert supabase_client.current_user_id() == "u1"
    assert supabase_client.current_user()["email"] == "a@b.c"


def test_failed_sign_in_leaves_user_signed_out(state):
    client = SimpleNamespace(auth=FakeAuth())
    supabase_client.sign_in(client, "a@b.c", "wrong")
    assert supabase_client.current_user_id() is None


def test_restore_session_reapplies_stored_tokens(state):
    state["supabase_session"] = {"access_token": "at", "refresh_token": "rt"}
    auth = FakeAuth()
    assert supabase_client.restore_session(SimpleNamespace(auth=auth)) is True
    assert auth.set_calls == [("at", "rt")]
    assert supabase_client.current_user_id() == "u1"


def test_restore_session_without_tokens_is_signed_out(state):
    assert supabase_client.restore_session(SimpleNamespace(auth=FakeAuth())) is False
    assert state["auth"]["authenticated"] is False
    assert "last_error" not in state["auth"]


def test_sign_out_clears_state(state):
    auth = FakeAuth()
    client = SimpleNamespace(auth=auth)
    supabase_client.sign_in(client, "a@b.c", "secret")
    supabase_client.sign_out(client)
    assert auth.signed_out
    assert "supabase_session" not in state
    assert supabase_client.current_user() is None
