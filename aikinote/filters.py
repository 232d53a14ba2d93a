"""Filtering and ordering of the in-memory training page list."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from aikinote.models import FilterCriteria, TrainingPageRecord

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_ORDERS = (SORT_NEWEST, SORT_OLDEST)


def filter_by_text(records: Sequence[TrainingPageRecord], query: str) -> List[TrainingPageRecord]:
    term = (query or "").strip()
    if not term:
        return list(records)
    needle = query.lower()
    return [
        record
        for record in records
        if needle in record.title.lower()
        or needle in record.content.lower()
        or needle in (record.comment or "").lower()
    ]


def filter_by_tags(
    records: Sequence[TrainingPageRecord], selected_tags: Iterable[str]
) -> List[TrainingPageRecord]:
    """Keep records carrying every selected tag."""
    wanted = list(selected_tags or ())
    if not wanted:
        return list(records)
    return [record for record in records if all(tag in record.tags for tag in wanted)]


def filter_by_date(
    records: Sequence[TrainingPageRecord], selected_date: Optional[str]
) -> List[TrainingPageRecord]:
    if not selected_date:
        return list(records)
    return [record for record in records if record.date == selected_date]


def filter_pages(
    records: Sequence[TrainingPageRecord], criteria: FilterCriteria
) -> List[TrainingPageRecord]:
    """Apply text, tag and date filters in turn; source order is kept."""
    filtered = filter_by_text(records, criteria.search_query)
    filtered = filter_by_tags(filtered, criteria.selected_tags)
    return filter_by_date(filtered, criteria.selected_date)


def sort_pages(
    records: Sequence[TrainingPageRecord], order: str = SORT_NEWEST
) -> List[TrainingPageRecord]:
    """Order by date; records on the same day keep their relative order."""
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {order!r}")
    return sorted(records, key=lambda record: record.date, reverse=(order == SORT_NEWEST))


def collect_tag_names(records: Iterable[TrainingPageRecord]) -> List[str]:
    seen = set()
    names: List[str] = []
    for record in records:
        for tag in record.tags:
            if tag not in seen:
                seen.add(tag)
                names.append(tag)
    return names


__all__ = [
    "SORT_NEWEST",
    "SORT_OLDEST",
    "SORT_ORDERS",
    "collect_tag_names",
    "filter_by_date",
    "filter_by_tags",
    "filter_by_text",
    "filter_pages",
    "sort_pages",
]
