"""Tag catalogue management: add, delete and reorder tags per category."""
from __future__ import annotations

from typing import List

import streamlit as st

from aikinote.context import AppContext
from aikinote.messages import message
from aikinote.models import TAG_CATEGORIES, Tag, tags_by_category
from aikinote.ui.toast import pop_toast, set_toast

PAGE_KEY_PREFIX = "ts_"


def k(suffix: str) -> str:
    return PAGE_KEY_PREFIX + suffix


def _move(ids: List[str], index: int, step: int) -> List[str]:
    """Swap ``ids[index]`` with its neighbour ``step`` positions away."""
    target = index + step
    if target < 0 or target >= len(ids):
        return ids
    moved = list(ids)
    moved[index], moved[target] = moved[target], moved[index]
    return moved


def render_category(ctx: AppContext, user_id: str, category: str, tags: List[Tag]) -> None:
    st.subheader(category)
    ids = [tag.id for tag in tags]
    if not tags:
        st.caption("タグがありません。")
    for index, tag in enumerate(tags):
        cols = st.columns([4, 1, 1, 1])
        cols[0].write(tag.name)
        if cols[1].button("↑", key=f"{k('up_')}{tag.id}", disabled=index == 0):
            _reorder(ctx, user_id, category, _move(ids, index, -1))
        if cols[2].button("↓", key=f"{k('down_')}{tag.id}", disabled=index == len(tags) - 1):
            _reorder(ctx, user_id, category, _move(ids, index, 1))
        if cols[3].button("🗑️", key=f"{k('delete_')}{tag.id}"):
            result = ctx.tags.delete_tag(tag.id, user_id)
            if result.success:
                set_toast(f"「{tag.name}」を削除しました")
            else:
                set_toast(result.error, "error")
            st.rerun()

    with st.form(k(f"add_{category}"), clear_on_submit=True):
        name = st.text_input("新しいタグ", key=k(f"name_{category}"))
        if st.form_submit_button("追加"):
            result = ctx.tags.create_tag(user_id, name, category)
            if result.success:
                set_toast(f"「{name.strip()}」を追加しました")
            else:
                set_toast(result.error, "error")
            st.rerun()


def _reorder(ctx: AppContext, user_id: str, category: str, ordered_ids: List[str]) -> None:
    result = ctx.tags.update_tag_order(user_id, category, ordered_ids)
    if not result.success:
        set_toast(result.error, "error")
    st.rerun()


def show_tag_settings(ctx: AppContext, user_id: str) -> None:
    pop_toast()
    st.title("タグ設定")

    result = ctx.tags.list_tags(user_id)
    if not result.success:
        st.error(message("tag_fetch_failed", ctx.config.locale))
        return
    tags = [Tag.from_row(row) for row in result.data]

    if not tags:
        st.info("タグがまだありません。初期タグを登録できます。")
        if st.button("初期タグを登録", type="primary"):
            seeded = ctx.tags.initialize_user_tags(user_id)
            if seeded.success:
                set_toast(f"{len(seeded.data)} 件のタグを登録しました")
            else:
                set_toast(seeded.error, "error")
            st.rerun()

    grouped = tags_by_category(tags)
    for category in TAG_CATEGORIES:
        render_category(ctx, user_id, category, grouped.get(category, []))


__all__ = ["show_tag_settings"]
