"""Toast queue: messages set during a run are shown on the next render tick."""
from __future__ import annotations

import streamlit as st

TOAST_KEY = "an_toast"
TOAST_ICONS = {"success": "✅", "warning": "⚠️", "error": "❌"}


def set_toast(message: str, kind: str = "success") -> None:
    """Queue a toast for the next render tick."""
    st.session_state[TOAST_KEY] = {"type": kind, "msg": message}


def pop_toast() -> None:
    """Display queued toast, if any."""
    toast = st.session_state.get(TOAST_KEY, {})
    if toast.get("msg") and toast.get("type"):
        icon = TOAST_ICONS.get(toast["type"], "ℹ️")
        st.toast(toast["msg"], icon=icon)
    st.session_state[TOAST_KEY] = {"type": None, "msg": ""}


def alert(message: str) -> None:
    """Error notifier handed to the sync store."""
    st.error(message)
    set_toast(message, "error")


__all__ = ["TOAST_ICONS", "TOAST_KEY", "alert", "pop_toast", "set_toast"]
