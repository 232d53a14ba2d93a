"""AikiNote Streamlit entry point: ``streamlit run aikinote/app.py``."""
from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# ``streamlit run`` puts this file's directory on sys.path, not the project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from aikinote import __version__  # noqa: E402
from aikinote.context import session_context  # noqa: E402
from aikinote.login import login, logout  # noqa: E402
from aikinote.supabase_client import current_user, current_user_id  # noqa: E402
from aikinote.utils.supa import SupabaseConfigError, SupabaseConnectionError  # noqa: E402
from aikinote.views.personal_pages import show_personal_pages  # noqa: E402
from aikinote.views.profile import show_profile  # noqa: E402
from aikinote.views.tag_settings import show_tag_settings  # noqa: E402

APP_TITLE = "AikiNote"
APP_TAGLINE = "合気道の稽古記録"

NAV_KEYS = ["Pages", "Tags", "Profile"]
NAV_LABELS = {
    "Pages": "📓 稽古ノート",
    "Tags": "🏷️ タグ設定",
    "Profile": "👤 プロフィール",
}
PAGE_FUNCS = {
    "Pages": show_personal_pages,
    "Tags": show_tag_settings,
    "Profile": show_profile,
}


def go(key: str) -> None:
    st.session_state["current_page"] = key
    st.query_params["p"] = key


def build_sidebar(ctx, current: str) -> None:
    with st.sidebar:
        st.markdown(f"### {APP_TITLE}")
        st.caption(APP_TAGLINE)
        for key in NAV_KEYS:
            if st.button(
                NAV_LABELS[key],
                key=f"nav_{key}",
                use_container_width=True,
                type="primary" if key == current else "secondary",
            ):
                go(key)
                st.rerun()
        st.divider()
        user = current_user() or {}
        if user.get("email"):
            st.caption(user["email"])
        if st.button("ログアウト", key="nav_logout", use_container_width=True):
            logout(ctx)
        st.caption(f"v{__version__}")


def main() -> None:
    st.set_page_config(page_title=APP_TITLE, page_icon="🥋", layout="wide")

    try:
        ctx = session_context()
    except SupabaseConfigError as exc:
        st.error(str(exc))
        st.stop()
    except SupabaseConnectionError as exc:
        st.error(str(exc))
        st.stop()

    login(ctx, title=APP_TITLE)
    user_id = current_user_id()
    if not user_id:
        st.warning("ユーザー情報を取得できませんでした。再度ログインしてください。")
        st.stop()

    if "current_page" not in st.session_state:
        p = st.query_params.get("p", None)
        st.session_state["current_page"] = p if p in NAV_KEYS else NAV_KEYS[0]
    current = st.session_state["current_page"]

    build_sidebar(ctx, current)
    PAGE_FUNCS[current](ctx, user_id)


if __name__ == "__main__":
    main()
