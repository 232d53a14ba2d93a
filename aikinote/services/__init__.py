"""Supabase-backed services for AikiNote."""

from __future__ import annotations

from .profile import ProfileService
from .tags import TagService
from .training_pages import TrainingPagesService

__all__ = ["ProfileService", "TagService", "TrainingPagesService"]
