"""Service layer for the user's tag catalogue (``UserTag``)."""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from aikinote import db_tables
from aikinote.cache import (
    SCOPE_PAGE_DETAIL,
    SCOPE_PAGES_LIST,
    SCOPE_TAGS_LIST,
    TTL_TAGS_LIST,
)
from aikinote.models import INITIAL_USER_TAGS, TAG_CATEGORIES
from aikinote.result import Result
from aikinote.services.base import SupabaseService
from aikinote.time_utils import utc_now_iso
from aikinote.utils.supa import first_row

__all__ = ["TagService", "sort_tag_rows"]

TAG_NAME_MAX = 48
# sort_order values are unique per category; reorders go through this range first
_TEMP_ORDER_OFFSET = 100000
_TAG_SCOPES = (SCOPE_TAGS_LIST, SCOPE_PAGES_LIST, SCOPE_PAGE_DETAIL)


class TagService(SupabaseService):
    log_prefix = "tags"

    def list_tags(self, user_id: str) -> Result[List[Dict[str, Any]]]:
        """Tags ordered by category, sort order (unset last) and name."""
        return self._cached(
            SCOPE_TAGS_LIST,
            {"userId": user_id},
            TTL_TAGS_LIST,
            lambda: self._guarded("list_tags", lambda: self._list(user_id)),
        )

    def create_tag(self, user_id: str, name: str, category: str) -> Result[Dict[str, Any]]:
        result = self._guarded("create_tag", lambda: self._create(user_id, name, category))
        self._invalidate(_TAG_SCOPES)
        return result

    def delete_tag(self, tag_id: str, user_id: str) -> Result[Dict[str, Any]]:
        result = self._guarded("delete_tag", lambda: self._delete(tag_id, user_id))
        self._invalidate(_TAG_SCOPES)
        return result

    def update_tag_order(
        self, user_id: str, category: str, ordered_ids: Sequence[str]
    ) -> Result[List[Dict[str, Any]]]:
        result = self._guarded(
            "update_tag_order", lambda: self._reorder(user_id, category, ordered_ids)
        )
        self._invalidate((SCOPE_TAGS_LIST,))
        return result

    def initialize_user_tags(self, user_id: str) -> Result[List[Dict[str, Any]]]:
        """Seed the default tag set when the user has no tags yet.

        Returns the inserted rows, or an empty list when tags already exist.
        """
        result = self._guarded("initialize_user_tags", lambda: self._initialize(user_id))
        self._invalidate((SCOPE_TAGS_LIST,))
        return result

    # --------------------------- internals ---------------------------- #

    def _rows(self, user_id: str) -> List[Dict[str, Any]]:
        if not user_id:
            raise ValueError("user_id is required")
        response = self._table(db_tables.USER_TAGS).select("*").eq("user_id", user_id).execute()
        return list(response.data or [])

    def _list(self, user_id: str) -> List[Dict[str, Any]]:
        return sort_tag_rows(self._rows(user_id))

    def _create(self, user_id: str, name: str, category: str) -> Dict[str, Any]:
        name = (name or "").strip()
        if not name:
            raise ValueError("Tag name is required")
        if len(name) > TAG_NAME_MAX:
            raise ValueError(f"Tag name must be at most {TAG_NAME_MAX} characters")
        if category not in TAG_CATEGORIES:
            raise ValueError(f"Unknown tag category: {category!r}")

        rows = [row for row in self._rows(user_id) if row.get("category") == category]
        if any(row.get("name") == name for row in rows):
            raise ValueError(f"Tag {name!r} already exists in {category}")

        orders = [row["sort_order"] for row in rows if isinstance(row.get("sort_order"), int)]
        next_order = max(orders) + 1 if orders and max(orders) >= 1 else 1

        response = (
            self._table(db_tables.USER_TAGS)
            .insert(
                {
                    "user_id": user_id,
                    "name": name,
                    "category": category,
                    "created_at": utc_now_iso(),
                    "sort_order": next_order,
                }
            )
            .execute()
        )
        row = first_row(response)
        if row is None:
            raise RuntimeError("Supabase did not return the created tag")
        return row

    def _delete(self, tag_id: str, user_id: str) -> Dict[str, Any]:
        target = first_row(
            self._table(db_tables.USER_TAGS)
            .select("*")
            .eq("id", tag_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if target is None:
            raise RuntimeError("Tag not found")

        self._table(db_tables.TRAINING_PAGE_TAGS).delete().eq("user_tag_id", tag_id).execute()
        self._table(db_tables.USER_TAGS).delete().eq("id", tag_id).eq(
            "user_id", user_id
        ).execute()
        return target

    def _reorder(
        self, user_id: str, category: str, ordered_ids: Sequence[str]
    ) -> List[Dict[str, Any]]:
        if category not in TAG_CATEGORIES:
            raise ValueError(f"Unknown tag category: {category!r}")
        rows = self._rows(user_id)
        in_category = sort_tag_rows([row for row in rows if row.get("category") == category])
        known = {str(row["id"]) for row in in_category}
        wanted = [str(tag_id) for tag_id in dict.fromkeys(ordered_ids)]
        if any(tag_id not in known for tag_id in wanted):
            raise ValueError("Tag not found in category")

        # tags missing from the request keep their relative order at the end
        final_ids = wanted + [str(row["id"]) for row in in_category if str(row["id"]) not in wanted]
        if not final_ids:
            return []

        for index, tag_id in enumerate(final_ids):
            self._set_order(user_id, tag_id, _TEMP_ORDER_OFFSET + index)
        for index, tag_id in enumerate(final_ids, start=1):
            self._set_order(user_id, tag_id, index)
        return self._list(user_id)

    def _set_order(self, user_id: str, tag_id: str, order: int) -> None:
        self._table(db_tables.USER_TAGS).update({"sort_order": order}).eq("id", tag_id).eq(
            "user_id", user_id
        ).execute()

    def _initialize(self, user_id: str) -> List[Dict[str, Any]]:
        if self._rows(user_id):
            return []
        order_in_category: Dict[str, int] = {}
        rows = []
        for category, name in INITIAL_USER_TAGS:
            order_in_category[category] = order_in_category.get(category, 0) + 1
            rows.append(
                {
                    "user_id": user_id,
                    "category": category,
                    "name": name,
                    "sort_order": order_in_category[category],
                }
            )
        response = self._table(db_tables.USER_TAGS).insert(rows).execute()
        return list(response.data or [])


def sort_tag_rows(rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Order tag rows by category, then sort order (unset last), then name."""

    def _key(row: Dict[str, Any]):
        category = row.get("category")
        category_rank = (
            TAG_CATEGORIES.index(category) if category in TAG_CATEGORIES else len(TAG_CATEGORIES)
        )
        order = row.get("sort_order")
        return (
            category_rank,
            order is None,
            order if order is not None else 0,
            str(row.get("name") or ""),
        )

    return sorted(rows, key=_key)
