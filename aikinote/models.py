"""Data model for training pages, tags and profiles."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from aikinote.time_utils import DEFAULT_TZ, to_local_date

TORI = "取り"
UKE = "受け"
WAZA = "技"
TAG_CATEGORIES: Tuple[str, ...] = (TORI, UKE, WAZA)

# payload field carrying the tag names of each category
CATEGORY_FIELDS: Dict[str, str] = {TORI: "tori", UKE: "uke", WAZA: "waza"}

INITIAL_USER_TAGS: Tuple[Tuple[str, str], ...] = (
    (TORI, "相半身"),
    (TORI, "逆半身"),
    (TORI, "正面"),
    (UKE, "片手取り"),
    (UKE, "諸手取り"),
    (UKE, "肩取り"),
    (WAZA, "四方投げ"),
    (WAZA, "入り身投げ"),
    (WAZA, "小手返し"),
)

TITLE_MAX = 100
CONTENT_MAX = 2000
COMMENT_MAX = 1000


@dataclass(frozen=True)
class TrainingPageRecord:
    """One training page as shown in the list view."""

    id: str
    title: str
    content: str
    comment: str = ""
    date: str = ""
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_page_with_tags(
        cls, item: Mapping[str, Any], tz: str = DEFAULT_TZ
    ) -> "TrainingPageRecord":
        """Build a record from a ``{"page": {...}, "tags": [...]}`` backend item."""
        page = item.get("page") or {}
        created_at = page.get("created_at")
        return cls(
            id=str(page.get("id")),
            title=page.get("title") or "",
            content=page.get("content") or "",
            comment=page.get("comment") or "",
            date=to_local_date(created_at, tz) if created_at else "",
            tags=tuple(
                str(tag.get("name"))
                for tag in (item.get("tags") or [])
                if tag and tag.get("name")
            ),
        )


@dataclass(frozen=True)
class FilterCriteria:
    search_query: str = ""
    selected_date: Optional[str] = None
    selected_tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Tag:
    id: str
    name: str
    category: str
    sort_order: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Tag":
        order = row.get("sort_order")
        return cls(
            id=str(row.get("id")),
            name=str(row.get("name") or ""),
            category=str(row.get("category") or ""),
            sort_order=int(order) if order is not None else None,
        )


def tags_by_category(tags: Iterable[Tag]) -> Dict[str, List[Tag]]:
    """Group tags per category, keeping the incoming order."""
    grouped: Dict[str, List[Tag]] = {category: [] for category in TAG_CATEGORIES}
    for tag in tags:
        grouped.setdefault(tag.category, []).append(tag)
    return grouped


@dataclass
class PageDraft:
    """Form data for creating or editing a training page."""

    title: str = ""
    content: str = ""
    comment: str = ""
    tori: List[str] = field(default_factory=list)
    uke: List[str] = field(default_factory=list)
    waza: List[str] = field(default_factory=list)
    page_id: Optional[str] = None

    def to_create_payload(self, user_id: str) -> Dict[str, Any]:
        return {
            "title": self.title.strip(),
            "tori": list(self.tori),
            "uke": list(self.uke),
            "waza": list(self.waza),
            "content": self.content,
            "comment": self.comment,
            "user_id": user_id,
        }

    def to_update_payload(self, user_id: str) -> Dict[str, Any]:
        if not self.page_id:
            raise ValueError("page_id is required for updates")
        payload = self.to_create_payload(user_id)
        payload["id"] = self.page_id
        return payload

    @classmethod
    def from_record(
        cls, record: TrainingPageRecord, available_tags: Sequence[Tag] = ()
    ) -> "PageDraft":
        """Rebuild form data from a record, sorting its tags into categories.

        Records only keep tag names, so the category of each name is looked up
        in the user's tag list; unknown names are dropped.
        """
        category_of = {tag.name: tag.category for tag in available_tags}
        draft = cls(
            title=record.title,
            content=record.content,
            comment=record.comment,
            page_id=record.id,
        )
        for name in record.tags:
            attr = CATEGORY_FIELDS.get(category_of.get(name, ""))
            if attr:
                getattr(draft, attr).append(name)
        return draft


@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str = ""
    username: str = ""
    profile_image_url: Optional[str] = None
    dojo_style_name: Optional[str] = None
    training_start_date: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserProfile":
        return cls(
            id=str(row.get("id")),
            email=row.get("email") or "",
            username=row.get("username") or "",
            profile_image_url=row.get("profile_image_url"),
            dojo_style_name=row.get("dojo_style_name"),
            training_start_date=row.get("training_start_date"),
        )


__all__ = [
    "CATEGORY_FIELDS",
    "COMMENT_MAX",
    "CONTENT_MAX",
    "FilterCriteria",
    "INITIAL_USER_TAGS",
    "PageDraft",
    "TAG_CATEGORIES",
    "TITLE_MAX",
    "TORI",
    "Tag",
    "TrainingPageRecord",
    "UKE",
    "UserProfile",
    "WAZA",
    "tags_by_category",
]
