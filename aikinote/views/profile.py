"""Profile view: show and edit the signed-in user's ``User`` row."""
from __future__ import annotations

from datetime import date
from typing import Optional

import streamlit as st

from aikinote.context import AppContext
from aikinote.messages import message
from aikinote.models import UserProfile
from aikinote.ui.toast import pop_toast, set_toast

EARLIEST_START = date(1950, 1, 1)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def show_profile(ctx: AppContext, user_id: str) -> None:
    pop_toast()
    st.title("プロフィール")

    result = ctx.profile.get_profile(user_id)
    if not result.success:
        st.error(message("profile_fetch_failed", ctx.config.locale))
        return
    profile = UserProfile.from_row(result.data)

    if profile.profile_image_url:
        st.image(profile.profile_image_url, width=96)
    st.caption(profile.email)

    with st.form("profile_form"):
        username = st.text_input("ユーザー名", value=profile.username)
        dojo = st.text_input("流派・道場", value=profile.dojo_style_name or "")
        started = st.date_input(
            "稽古開始日",
            value=_parse_date(profile.training_start_date),
            min_value=EARLIEST_START,
            max_value=date.today(),
            format="YYYY-MM-DD",
        )
        image_url = st.text_input("プロフィール画像URL", value=profile.profile_image_url or "")
        submitted = st.form_submit_button("保存", type="primary")

    if submitted:
        updated = ctx.profile.update_profile(
            user_id,
            username=username,
            dojo_style_name=dojo or None,
            training_start_date=started.isoformat() if started else None,
            profile_image_url=image_url or None,
        )
        if updated.success:
            set_toast("プロフィールを更新しました")
        else:
            set_toast(updated.error, "error")
        st.rerun()


__all__ = ["show_profile"]
