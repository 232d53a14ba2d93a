"""Streamlit authentication gate backed by Supabase email/password auth."""

from __future__ import annotations

import streamlit as st
from supabase import AuthApiError, AuthError

from aikinote.context import AppContext
from aikinote.supabase_client import (
    restore_session,
    session_value,
    sign_in as supabase_sign_in,
    sign_out as supabase_sign_out,
)

_LAST_EMAIL_KEY = "login__last_email"
_FORM_KEY = "login_form"


def logout(ctx: AppContext) -> None:
    """Terminate the Supabase session, drop cached reads and rerun the app."""
    try:
        supabase_sign_out(ctx.client)
    except AuthError as exc:
        print(f"Supabase sign_out failed: {exc}")
    ctx.cache.clear()
    st.rerun()


def login(ctx: AppContext, title: str = "AikiNote") -> None:
    """Render the sign-in form and stop the run unless a session is active."""
    if restore_session(ctx.client):
        return

    auth_state = st.session_state.get("auth", {})
    last_error = auth_state.pop("last_error", None)

    with st.form(_FORM_KEY, clear_on_submit=False):
        st.subheader(title)
        st.caption("メールアドレスとパスワードでログインしてください。")
        email = st.text_input(
            "メールアドレス",
            value=st.session_state.get(_LAST_EMAIL_KEY, ""),
            autocomplete="email",
            placeholder="you@example.com",
        )
        password = st.text_input(
            "パスワード",
            type="password",
            autocomplete="current-password",
        )
        submitted = st.form_submit_button("ログイン", type="primary")

    if last_error:
        st.warning(last_error)

    if submitted:
        email = email.strip()
        st.session_state[_LAST_EMAIL_KEY] = email
        if not email or not password:
            st.warning("メールアドレスとパスワードを入力してください。")
            st.stop()
        try:
            response = supabase_sign_in(ctx.client, email=email, password=password)
        except AuthApiError as exc:
            print(f"Supabase sign_in invalid credentials: {exc}")
            st.error("メールアドレスまたはパスワードが正しくありません。")
            st.stop()
        except AuthError as exc:
            print(f"Supabase sign_in auth error: {exc}")
            st.error("認証に失敗しました。しばらくしてから再度お試しください。")
            st.stop()

        session = getattr(response, "session", None)
        if not session or not session_value(session, "access_token"):
            st.error("有効なセッションを取得できませんでした。")
            st.stop()
        st.rerun()

    st.stop()


__all__ = ["login", "logout"]
