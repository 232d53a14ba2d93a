"""Service layer for the ``User`` profile row."""
from __future__ import annotations

from typing import Any, Dict, Optional

from aikinote import db_tables
from aikinote.cache import SCOPE_USER_PROFILE, TTL_USER_PROFILE
from aikinote.result import Result
from aikinote.services.base import SupabaseService
from aikinote.utils.supa import first_row

__all__ = ["ProfileService", "PROFILE_FIELDS"]

PROFILE_FIELDS = "id, email, username, profile_image_url, dojo_style_name, training_start_date"
_NULLABLE_FIELDS = ("dojo_style_name", "training_start_date", "profile_image_url")
_UNSET: Any = object()


class ProfileService(SupabaseService):
    log_prefix = "profile"

    def get_profile(self, user_id: str) -> Result[Dict[str, Any]]:
        return self._cached(
            SCOPE_USER_PROFILE,
            {"userId": user_id},
            TTL_USER_PROFILE,
            lambda: self._guarded("get_profile", lambda: self._get(user_id)),
        )

    def update_profile(
        self,
        user_id: str,
        *,
        username: Optional[str] = _UNSET,
        dojo_style_name: Optional[str] = _UNSET,
        training_start_date: Optional[str] = _UNSET,
        profile_image_url: Optional[str] = _UNSET,
    ) -> Result[Dict[str, Any]]:
        """Patch only the fields that were passed; ``None`` clears nullable fields."""
        patch = {
            "username": username,
            "dojo_style_name": dojo_style_name,
            "training_start_date": training_start_date,
            "profile_image_url": profile_image_url,
        }
        patch = {key: value for key, value in patch.items() if value is not _UNSET}
        result = self._guarded("update_profile", lambda: self._update(user_id, patch))
        if result.success:
            self._invalidate((SCOPE_USER_PROFILE,))
        return result

    def _get(self, user_id: str) -> Dict[str, Any]:
        if not user_id:
            raise ValueError("user_id is required")
        row = first_row(
            self._table(db_tables.USERS)
            .select(PROFILE_FIELDS)
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if row is None:
            raise RuntimeError("User not found")
        return row

    def _update(self, user_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        if not user_id:
            raise ValueError("user_id is required")
        clean: Dict[str, Any] = {}
        if "username" in patch:
            username = (patch["username"] or "").strip()
            if not username:
                raise ValueError("username is required")
            clean["username"] = username
        for key in _NULLABLE_FIELDS:
            if key in patch:
                value = patch[key]
                clean[key] = (str(value).strip() or None) if value is not None else None
        if not clean:
            return self._get(user_id)

        row = first_row(
            self._table(db_tables.USERS).update(clean).eq("id", user_id).execute()
        )
        if row is None:
            raise RuntimeError("User not found")
        return row
