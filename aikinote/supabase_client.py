"""Supabase auth/session helpers for AikiNote.

The signed-in user lives in ``st.session_state["auth"]``; access and refresh
tokens are mirrored under ``st.session_state["supabase_session"]`` so a
rebuilt client can pick the session up again.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st
from supabase import AuthApiError, AuthError

__all__ = [
    "current_user",
    "current_user_id",
    "restore_session",
    "session_value",
    "sign_in",
    "sign_out",
]

_AUTH_STATE_KEY = "auth"
_TOKENS_KEY = "supabase_session"
_USER_FIELDS = ("id", "email", "user_metadata", "created_at", "last_sign_in_at")
_EXPIRED_MSG = "セッションの有効期限が切れました。再度ログインしてください。"


def session_value(session: Any, key: str) -> Any:
    """Read ``key`` from a gotrue session model or a plain dict."""
    if isinstance(session, dict):
        return session.get(key)
    return getattr(session, key, None)


def _user_dict(user: Any) -> Optional[Dict[str, Any]]:
    if user is None or isinstance(user, dict):
        return user
    if callable(getattr(user, "model_dump", None)):
        return user.model_dump(mode="json")
    return {field: getattr(user, field) for field in _USER_FIELDS if hasattr(user, field)}


class AuthState:
    """View over the auth entries kept in Streamlit session state."""

    def __init__(self) -> None:
        self.data: Dict[str, Any] = st.session_state.setdefault(
            _AUTH_STATE_KEY, {"authenticated": False, "user": None}
        )

    def remember(self, session: Any, user: Any = None) -> None:
        tokens = {
            key: session_value(session, key)
            for key in ("access_token", "refresh_token")
            if session_value(session, key)
        }
        if tokens:
            st.session_state[_TOKENS_KEY] = tokens
        self.data.update(
            authenticated=True,
            user=_user_dict(user or session_value(session, "user")),
        )
        self.data.pop("last_error", None)

    def forget(self, reason: Optional[str] = None) -> None:
        """Drop tokens and user; ``reason`` is shown only if tokens existed."""
        had_tokens = st.session_state.pop(_TOKENS_KEY, None) is not None
        self.data.update(authenticated=False, user=None)
        if reason and had_tokens:
            self.data["last_error"] = reason
        else:
            self.data.pop("last_error", None)

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self.data.get("user") if self.data.get("authenticated") else None


def _has_token(session: Any) -> bool:
    return bool(session and session_value(session, "access_token"))


def _live_session(client, state: AuthState) -> Any:
    try:
        return client.auth.get_session()
    except AuthApiError as exc:
        print(f"[auth] get_session failed: {exc}")
        state.forget(_EXPIRED_MSG)
        return None


def restore_session(client) -> bool:
    """Make sure ``client`` carries the session stored for this browser tab.

    Returns ``True`` when a usable session is active afterwards.
    """
    state = AuthState()
    live = _live_session(client, state)
    tokens = st.session_state.get(_TOKENS_KEY) or {}
    access, refresh = tokens.get("access_token"), tokens.get("refresh_token")

    if access and refresh and access != session_value(live, "access_token"):
        try:
            response = client.auth.set_session(access, refresh)
        except AuthError as exc:
            print(f"[auth] set_session failed: {exc}")
            state.forget(_EXPIRED_MSG)
            return False
        if _has_token(response.session):
            state.remember(response.session, response.user)
            return True
        live = _live_session(client, state)

    if _has_token(live):
        state.remember(live)
        return True
    state.forget(_EXPIRED_MSG if tokens else None)
    return False


def sign_in(client, email: str, password: str):
    """Email/password sign-in; tokens are stored only for a real session."""
    response = client.auth.sign_in_with_password({"email": email, "password": password})
    state = AuthState()
    if _has_token(response.session):
        state.remember(response.session, response.user)
    else:
        state.forget()
    return response


def sign_out(client) -> None:
    try:
        client.auth.sign_out()
    finally:
        AuthState().forget()


def current_user() -> Optional[Dict[str, Any]]:
    return AuthState().user


def current_user_id() -> Optional[str]:
    user_id = (current_user() or {}).get("id")
    return str(user_id) if user_id else None
