"""Service layer for training pages.

All direct Supabase interactions for training pages live here so the
Streamlit views and the sync store only ever see :class:`~aikinote.result.Ok`
/ :class:`~aikinote.result.Err` results. A page is stored in ``TrainingPage``;
its tags are ``UserTag`` rows linked through ``TrainingPageTag``.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from aikinote import db_tables
from aikinote.cache import (
    SCOPE_PAGE_DETAIL,
    SCOPE_PAGES_LIST,
    TTL_PAGE_DETAIL,
    TTL_PAGES_LIST,
)
from aikinote.models import CATEGORY_FIELDS, COMMENT_MAX, CONTENT_MAX, TITLE_MAX
from aikinote.result import Result
from aikinote.services.base import SupabaseService
from aikinote.time_utils import utc_day_bounds, utc_now_iso
from aikinote.utils.supa import first_row

__all__ = ["TrainingPagesService", "clean_page_payload"]

MAX_LIST_LIMIT = 100
_PAGE_SCOPES = (SCOPE_PAGES_LIST, SCOPE_PAGE_DETAIL)


class TrainingPagesService(SupabaseService):
    log_prefix = "training_pages"

    # ----------------------------- reads ------------------------------ #

    def get_pages(
        self,
        user_id: str,
        *,
        limit: int = 20,
        offset: int = 0,
        query: str = "",
        tags: Iterable[str] = (),
        date: Optional[str] = None,
    ) -> Result[Dict[str, Any]]:
        """Return ``{"training_pages": [{"page", "tags"}]}`` newest first."""
        tag_list = [tag for tag in tags if tag]
        params = {
            "userId": user_id,
            "limit": limit,
            "offset": offset,
            "query": query,
            "tags": tag_list,
            "date": date,
        }
        return self._cached(
            SCOPE_PAGES_LIST,
            params,
            TTL_PAGES_LIST,
            lambda: self._guarded(
                "get_pages",
                lambda: {
                    "training_pages": self._list_pages(
                        user_id, limit, offset, query, tag_list, date
                    )
                },
            ),
        )

    def get_page(self, page_id: str, user_id: str) -> Result[Dict[str, Any]]:
        return self._cached(
            SCOPE_PAGE_DETAIL,
            {"pageId": page_id, "userId": user_id},
            TTL_PAGE_DETAIL,
            lambda: self._guarded("get_page", lambda: self._get_page(page_id, user_id)),
        )

    # ---------------------------- writes ------------------------------ #

    def create_page(self, payload: Mapping[str, Any]) -> Result[Dict[str, Any]]:
        result = self._guarded("create_page", lambda: self._create(payload))
        self._invalidate(_PAGE_SCOPES)
        return result

    def update_page(self, payload: Mapping[str, Any]) -> Result[Dict[str, Any]]:
        result = self._guarded("update_page", lambda: self._update(payload))
        self._invalidate(_PAGE_SCOPES)
        return result

    def delete_page(self, page_id: str, user_id: str) -> Result[bool]:
        result = self._guarded("delete_page", lambda: self._delete(page_id, user_id))
        self._invalidate(_PAGE_SCOPES)
        return result

    # --------------------------- internals ---------------------------- #

    def _list_pages(
        self,
        user_id: str,
        limit: int,
        offset: int,
        query: str,
        tags: Sequence[str],
        date: Optional[str],
    ) -> List[Dict[str, Any]]:
        if not user_id:
            raise ValueError("user_id is required")

        page_ids: Optional[List[str]] = None
        if tags:
            page_ids = self._page_ids_with_all_tags(user_id, tags)
            if not page_ids:
                return []

        builder = self._table(db_tables.TRAINING_PAGES).select("*").eq("user_id", user_id)

        term = (query or "").strip()
        if term:
            builder = builder.ilike("title", f"%{term}%")

        if date:
            start, end = utc_day_bounds(date)
            builder = builder.gte("created_at", start).lte("created_at", end)

        if page_ids is not None:
            builder = builder.in_("id", page_ids)

        size = min(max(int(limit), 1), MAX_LIST_LIMIT)
        range_start = max(int(offset), 0)
        response = (
            builder.order("created_at", desc=True)
            .range(range_start, range_start + size - 1)
            .execute()
        )
        pages = response.data or []
        if not pages:
            return []

        tags_by_page = self._tags_for_pages([str(page["id"]) for page in pages])
        return [
            {"page": page, "tags": tags_by_page.get(str(page["id"]), [])} for page in pages
        ]

    def _get_page(self, page_id: str, user_id: str) -> Dict[str, Any]:
        page = self._owned_page(page_id, user_id, columns="*")
        if page is None:
            raise RuntimeError("Page not found or access denied")
        return {"page": page, "tags": self._tags_for_pages([page_id]).get(page_id, [])}

    def _create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        clean = clean_page_payload(payload)
        response = (
            self._table(db_tables.TRAINING_PAGES)
            .insert(
                {
                    "title": clean["title"],
                    "content": clean["content"],
                    "comment": clean["comment"],
                    "user_id": clean["user_id"],
                }
            )
            .execute()
        )
        page = first_row(response)
        if page is None:
            raise RuntimeError("Supabase did not return the created page")

        tags = self._resolve_tags(clean)
        self._link_tags(str(page["id"]), tags)
        return {"page": page, "tags": tags}

    def _update(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        clean = clean_page_payload(payload, require_id=True)
        page_id, user_id = clean["id"], clean["user_id"]
        if self._owned_page(page_id, user_id) is None:
            raise RuntimeError("Page not found or you are not allowed to edit it")

        response = (
            self._table(db_tables.TRAINING_PAGES)
            .update(
                {
                    "title": clean["title"],
                    "content": clean["content"],
                    "comment": clean["comment"],
                    "updated_at": utc_now_iso(),
                }
            )
            .eq("id", page_id)
            .eq("user_id", user_id)
            .execute()
        )
        page = first_row(response)
        if page is None:
            raise RuntimeError("Supabase did not return the updated page")

        self._table(db_tables.TRAINING_PAGE_TAGS).delete().eq(
            "training_page_id", page_id
        ).execute()
        tags = self._resolve_tags(clean)
        self._link_tags(page_id, tags)
        return {"page": page, "tags": tags}

    def _delete(self, page_id: str, user_id: str) -> bool:
        if not page_id or not user_id:
            raise ValueError("page_id and user_id are required")
        if self._owned_page(page_id, user_id) is None:
            raise RuntimeError("Page not found or you are not allowed to delete it")

        self._table(db_tables.TRAINING_PAGE_TAGS).delete().eq(
            "training_page_id", page_id
        ).execute()
        self._table(db_tables.TRAINING_PAGES).delete().eq("id", page_id).eq(
            "user_id", user_id
        ).execute()
        return True

    def _owned_page(
        self, page_id: str, user_id: str, *, columns: str = "id"
    ) -> Optional[Dict[str, Any]]:
        response = (
            self._table(db_tables.TRAINING_PAGES)
            .select(columns)
            .eq("id", page_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return first_row(response)

    def _page_ids_with_all_tags(self, user_id: str, tag_names: Sequence[str]) -> List[str]:
        """IDs of the user's pages linked to every name in ``tag_names``."""
        names = list(dict.fromkeys(tag_names))
        response = (
            self._table(db_tables.USER_TAGS)
            .select("id, name")
            .eq("user_id", user_id)
            .in_("name", names)
            .execute()
        )
        ids_by_name: Dict[str, Set[str]] = {}
        for row in response.data or []:
            ids_by_name.setdefault(row["name"], set()).add(str(row["id"]))
        if any(name not in ids_by_name for name in names):
            return []

        all_ids = sorted(set().union(*ids_by_name.values()))
        links = (
            self._table(db_tables.TRAINING_PAGE_TAGS)
            .select("training_page_id, user_tag_id")
            .in_("user_tag_id", all_ids)
            .execute()
        )
        tags_per_page: Dict[str, Set[str]] = {}
        for row in links.data or []:
            tags_per_page.setdefault(str(row["training_page_id"]), set()).add(
                str(row["user_tag_id"])
            )
        return [
            page_id
            for page_id, tag_ids in tags_per_page.items()
            if all(tag_ids & ids_by_name[name] for name in names)
        ]

    def _tags_for_pages(self, page_ids: Sequence[str]) -> Dict[str, List[Dict[str, Any]]]:
        grouped: Dict[str, List[Dict[str, Any]]] = {page_id: [] for page_id in page_ids}
        if not page_ids:
            return grouped
        response = (
            self._table(db_tables.TRAINING_PAGE_TAGS)
            .select("training_page_id, UserTag(*)")
            .in_("training_page_id", list(page_ids))
            .execute()
        )
        for row in response.data or []:
            tag = row.get("UserTag")
            if isinstance(tag, list):
                tag = tag[0] if tag else None
            if tag:
                grouped.setdefault(str(row["training_page_id"]), []).append(tag)
        return grouped

    def _resolve_tags(self, clean: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Find or create the ``UserTag`` row for every tag name in the payload."""
        user_id = clean["user_id"]
        resolved: List[Dict[str, Any]] = []
        for category, field_name in CATEGORY_FIELDS.items():
            for name in clean[field_name]:
                existing = first_row(
                    self._table(db_tables.USER_TAGS)
                    .select("*")
                    .eq("user_id", user_id)
                    .eq("name", name)
                    .eq("category", category)
                    .limit(1)
                    .execute()
                )
                if existing is None:
                    existing = first_row(
                        self._table(db_tables.USER_TAGS)
                        .insert(
                            {
                                "user_id": user_id,
                                "name": name,
                                "category": category,
                                "created_at": utc_now_iso(),
                            }
                        )
                        .execute()
                    )
                    if existing is None:
                        raise RuntimeError(f"Failed to create tag {name!r}")
                resolved.append(existing)
        return resolved

    def _link_tags(self, page_id: str, tags: Sequence[Mapping[str, Any]]) -> None:
        if not tags:
            return
        self._table(db_tables.TRAINING_PAGE_TAGS).insert(
            [{"training_page_id": page_id, "user_tag_id": tag["id"]} for tag in tags]
        ).execute()


def clean_page_payload(
    payload: Mapping[str, Any], *, require_id: bool = False
) -> Dict[str, Any]:
    """Validate and normalise a create/update payload; raises ``ValueError``."""
    title = str(payload.get("title") or "").strip()
    content = str(payload.get("content") or "")
    comment = str(payload.get("comment") or "")
    user_id = payload.get("user_id")

    if not user_id:
        raise ValueError("user_id is required")
    if not title:
        raise ValueError("title is required")
    if len(title) > TITLE_MAX:
        raise ValueError(f"title must be at most {TITLE_MAX} characters")
    if not content.strip():
        raise ValueError("content is required")
    if len(content) > CONTENT_MAX:
        raise ValueError(f"content must be at most {CONTENT_MAX} characters")
    if len(comment) > COMMENT_MAX:
        raise ValueError(f"comment must be at most {COMMENT_MAX} characters")

    clean: Dict[str, Any] = {
        "title": title,
        "content": content,
        "comment": comment,
        "user_id": str(user_id),
    }
    for field_name in CATEGORY_FIELDS.values():
        clean[field_name] = _normalize_tag_names(payload.get(field_name))

    if require_id:
        page_id = payload.get("id")
        if not page_id:
            raise ValueError("id is required")
        clean["id"] = str(page_id)
    return clean


def _normalize_tag_names(tags: Any) -> List[str]:
    if not tags:
        return []
    raw = tags.split(",") if isinstance(tags, str) else list(tags)
    seen = set()
    result: List[str] = []
    for tag in raw:
        text = str(tag or "").strip()
        if not text or text in seen:
            continue
        seen.add(text)
        result.append(text)
    return result
