"""Streamlit views rendered by :mod:`aikinote.app`.

Kept outside a ``pages/`` directory so Streamlit does not auto-register them as
multipage entries; navigation is handled by the sidebar in ``aikinote.app``.
"""
from __future__ import annotations
