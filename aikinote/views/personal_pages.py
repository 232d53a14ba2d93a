"""Personal training page list: search, filter, create, edit and delete."""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

import streamlit as st

from aikinote.context import AppContext
from aikinote.debounce import Debounce
from aikinote.filters import SORT_NEWEST, SORT_OLDEST, SORT_ORDERS, filter_pages, sort_pages
from aikinote.messages import message
from aikinote.modals import TrainingPageModals
from aikinote.models import (
    CATEGORY_FIELDS,
    COMMENT_MAX,
    CONTENT_MAX,
    TITLE_MAX,
    FilterCriteria,
    PageDraft,
    Tag,
    TrainingPageRecord,
    tags_by_category,
)
from aikinote.pagination import PaginationWindow
from aikinote.sync import TrainingPagesStore
from aikinote.ui.toast import alert, pop_toast, set_toast

PAGE_KEY_PREFIX = "pp_"
CARD_CONTENT_LIMIT = 200
SORT_LABELS = {SORT_NEWEST: "新しい順", SORT_OLDEST: "古い順"}


def k(suffix: str) -> str:
    return PAGE_KEY_PREFIX + suffix


SEARCH_KEY = k("search")
DATE_KEY = k("date")
SORT_KEY = k("sort")


# ---------------------------- Utility & State ----------------------------- #

def init_state(ctx: AppContext) -> None:
    ss = st.session_state
    if k("store") not in ss:
        ss[k("store")] = ctx.new_store(alert)
    ss.setdefault(k("user_id"), None)
    ss.setdefault(k("criteria"), FilterCriteria())
    ss.setdefault(k("search_debounce"), Debounce("", ctx.config.search_debounce_ms))
    ss.setdefault(k("window"), PaginationWindow(ctx.config.page_size))
    ss.setdefault(k("modals"), TrainingPageModals())
    ss.setdefault(k("expanded"), set())


def _store() -> TrainingPagesStore:
    return st.session_state[k("store")]


def _modals() -> TrainingPageModals:
    return st.session_state[k("modals")]


def _criteria() -> FilterCriteria:
    return st.session_state[k("criteria")]


def _set_criteria(**changes) -> None:
    current = _criteria()
    st.session_state[k("criteria")] = FilterCriteria(
        search_query=changes.get("search_query", current.search_query),
        selected_date=changes.get("selected_date", current.selected_date),
        selected_tags=tuple(changes.get("selected_tags", current.selected_tags)),
    )


def sync_user(user_id: str) -> None:
    """Load the list on first render and whenever the signed-in user changes."""
    store = _store()
    previous = st.session_state.get(k("user_id"))
    if previous == user_id:
        return
    if previous is not None:
        store.close()
        _modals().close_all()
        st.session_state[k("criteria")] = FilterCriteria()
    st.session_state[k("user_id")] = user_id
    with st.spinner("読み込み中..."):
        store.fetch_all(user_id)


def load_tags(ctx: AppContext, user_id: str) -> List[Tag]:
    result = ctx.tags.list_tags(user_id)
    if not result.success:
        set_toast(message("tag_fetch_failed", ctx.config.locale), "error")
        return []
    return [Tag.from_row(row) for row in result.data]


def truncate_text(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: max(limit - 1, 0)].rstrip() + "…"


# ------------------------------- Header ----------------------------------- #

def render_header(total: int) -> None:
    st.title("稽古ノート")
    st.caption(f"{total} 件のページ")


def render_actions() -> None:
    cols = st.columns([1, 1, 3])
    with cols[0]:
        if st.button("＋ 新規作成", type="primary", use_container_width=True):
            _modals().open_create()
    with cols[1]:
        if st.button("🔄 再読み込み", use_container_width=True):
            store = _store()
            store.close()
            store.fetch_all(st.session_state.get(k("user_id")))
            st.rerun()


def render_filters(tags: List[Tag]) -> None:
    """Search box, date picker, sort order and the tag filter toggle."""
    debounce: Debounce = st.session_state[k("search_debounce")]
    col_q, col_date, col_sort = st.columns([3, 2, 1])
    with col_q:
        raw = st.text_input("検索", key=SEARCH_KEY, placeholder="タイトル・内容・コメント")
    with col_date:
        picked: Optional[date] = st.date_input("日付", value=None, key=DATE_KEY)
    with col_sort:
        st.selectbox(
            "並び順",
            options=list(SORT_ORDERS),
            format_func=lambda order: SORT_LABELS[order],
            key=SORT_KEY,
        )

    debounce.set(raw)
    _set_criteria(
        search_query=debounce.value,
        selected_date=picked.isoformat() if picked else None,
    )
    st.fragment(_commit_search, run_every=debounce.poll_interval())()

    criteria = _criteria()
    tag_cols = st.columns([1, 4])
    with tag_cols[0]:
        label = f"🏷️ タグ ({len(criteria.selected_tags)})" if criteria.selected_tags else "🏷️ タグ"
        if st.button(label, use_container_width=True):
            _modals().open_tag_modal()
    with tag_cols[1]:
        if criteria.selected_tags:
            st.caption(" / ".join(criteria.selected_tags))

    if _modals().tag_modal_open:
        render_tag_filter(tags)


def _commit_search() -> None:
    """Rerun the whole page once the debounced search text has settled."""
    debounce: Debounce = st.session_state[k("search_debounce")]
    if debounce.value != _criteria().search_query:
        st.rerun()


def render_tag_filter(tags: List[Tag]) -> None:
    grouped = tags_by_category(tags)
    criteria = _criteria()
    with st.form(k("tag_filter_form")):
        picked: List[str] = []
        for category, items in grouped.items():
            names = [tag.name for tag in items]
            picked.extend(
                st.multiselect(
                    category,
                    options=names,
                    default=[name for name in criteria.selected_tags if name in names],
                )
            )
        cols = st.columns(2)
        with cols[0]:
            apply = st.form_submit_button("適用", type="primary", use_container_width=True)
        with cols[1]:
            clear = st.form_submit_button("クリア", use_container_width=True)

    if apply:
        _set_criteria(selected_tags=picked)
        _modals().close_tag_modal()
        st.rerun()
    elif clear:
        _set_criteria(selected_tags=())
        _modals().close_tag_modal()
        st.rerun()


# -------------------------------- List ------------------------------------ #

def render_page_list(records: List[TrainingPageRecord], tags: List[Tag]) -> None:
    window: PaginationWindow = st.session_state[k("window")]
    window.sync(_criteria())

    if not records:
        if _store().loading:
            st.info("読み込み中...")
        elif _criteria() != FilterCriteria():
            st.info("条件に一致するページがありません。")
        else:
            st.info("まだページがありません。「新規作成」から記録を始めましょう。")
        return

    for record in window.visible(records):
        render_page_card(record, tags)

    if window.has_more(len(records)):
        if st.button("もっと見る", key=k("load_more"), use_container_width=True):
            window.load_more()
            st.rerun()


def render_page_card(record: TrainingPageRecord, tags: List[Tag]) -> None:
    expanded: set = st.session_state[k("expanded")]
    with st.container(border=True):
        st.markdown(f"**{record.title}**")
        st.caption(record.date)
        shown = record.content if record.id in expanded else truncate_text(
            record.content, CARD_CONTENT_LIMIT
        )
        st.write(shown)
        if record.comment and record.id in expanded:
            st.caption(record.comment)
        if record.tags:
            st.caption(" ".join(f"#{tag}" for tag in record.tags))

        cols = st.columns([1, 1, 1, 4])
        with cols[0]:
            label = "閉じる" if record.id in expanded else "全文"
            if st.button(label, key=f"{k('toggle_')}{record.id}", use_container_width=True):
                expanded.symmetric_difference_update({record.id})
                st.rerun()
        with cols[1]:
            if st.button("✏️ 編集", key=f"{k('edit_')}{record.id}", use_container_width=True):
                _modals().open_edit(PageDraft.from_record(record, tags))
        with cols[2]:
            if st.button("🗑️ 削除", key=f"{k('delete_')}{record.id}", use_container_width=True):
                _modals().open_delete(record.id)


# -------------------------------- Modals ---------------------------------- #

def modal_create(ctx: AppContext, tags: List[Tag], user_id: str) -> None:
    modals = _modals()
    if not modals.create_open:
        return
    st.subheader("新しいページ")
    draft = _page_form(tags, PageDraft(), form_key="create")
    if draft is None:
        return
    if draft is False:
        modals.close_create()
        st.rerun()
    if _store().create(draft, user_id):
        modals.close_create()
        set_toast(message("page_created", ctx.config.locale))
        st.rerun()


def modal_edit(ctx: AppContext, tags: List[Tag], user_id: str) -> None:
    modals = _modals()
    if not modals.edit_open or modals.editing_page is None:
        return
    st.subheader("ページを編集")
    original = modals.editing_page
    draft = _page_form(tags, original, form_key=f"edit_{original.page_id}")
    if draft is None:
        return
    if draft is False:
        modals.close_edit()
        st.rerun()
    draft.page_id = original.page_id
    if _store().update(draft.to_update_payload(user_id)):
        modals.close_edit()
        set_toast(message("page_updated", ctx.config.locale))
        st.rerun()


def modal_delete(ctx: AppContext, user_id: str) -> None:
    modals = _modals()
    if not modals.delete_open or not modals.delete_target_id:
        return
    target = _store().get(modals.delete_target_id)
    title = target.title if target else modals.delete_target_id
    st.error(f"「{title}」を削除しますか？この操作は取り消せません。")
    cols = st.columns(2)
    with cols[0]:
        if st.button("削除", type="primary", use_container_width=True, key=k("confirm_delete")):
            if _store().remove(modals.delete_target_id, user_id):
                modals.close_delete()
                set_toast(message("page_deleted", ctx.config.locale))
                st.rerun()
    with cols[1]:
        if st.button("キャンセル", use_container_width=True, key=k("cancel_delete")):
            modals.close_delete()
            st.rerun()


def _page_form(tags: List[Tag], initial: PageDraft, *, form_key: str):
    """Render the page form; returns a draft on submit, ``False`` on cancel."""
    grouped = tags_by_category(tags)
    with st.form(k(f"page_form_{form_key}")):
        title = st.text_input("タイトル", value=initial.title, max_chars=TITLE_MAX)
        selections: Dict[str, List[str]] = {}
        for category, attr in CATEGORY_FIELDS.items():
            options = [tag.name for tag in grouped.get(category, [])]
            current = list(getattr(initial, attr))
            options += [name for name in current if name not in options]
            selections[attr] = st.multiselect(category, options=options, default=current)
        content = st.text_area("内容", value=initial.content, height=200, max_chars=CONTENT_MAX)
        comment = st.text_area("コメント", value=initial.comment, max_chars=COMMENT_MAX)
        cols = st.columns(2)
        with cols[0]:
            submitted = st.form_submit_button("保存", type="primary", use_container_width=True)
        with cols[1]:
            cancel = st.form_submit_button("キャンセル", use_container_width=True)

    if cancel:
        return False
    if not submitted:
        return None
    if not title.strip():
        set_toast("タイトルは必須です。", "warning")
        return None
    if not content.strip():
        set_toast("内容は必須です。", "warning")
        return None
    return PageDraft(
        title=title,
        content=content,
        comment=comment,
        tori=selections["tori"],
        uke=selections["uke"],
        waza=selections["waza"],
    )


# --------------------------------- Page ----------------------------------- #

def show_personal_pages(ctx: AppContext, user_id: str) -> None:
    init_state(ctx)
    pop_toast()
    sync_user(user_id)

    tags = load_tags(ctx, user_id)
    store = _store()
    render_header(len(store))
    render_actions()
    modal_create(ctx, tags, user_id)
    modal_edit(ctx, tags, user_id)
    modal_delete(ctx, user_id)
    render_filters(tags)

    records = sort_pages(
        filter_pages(store.pages, _criteria()),
        st.session_state.get(SORT_KEY, SORT_NEWEST),
    )
    render_page_list(records, tags)


__all__ = ["show_personal_pages"]
