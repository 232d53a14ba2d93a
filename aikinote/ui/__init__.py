"""Small Streamlit UI helpers shared by the views."""
from aikinote.ui.toast import alert, pop_toast, set_toast

__all__ = ["alert", "pop_toast", "set_toast"]
