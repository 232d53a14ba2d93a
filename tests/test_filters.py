import pytest

from aikinote.filters import (
    SORT_NEWEST,
    SORT_OLDEST,
    collect_tag_names,
    filter_by_date,
    filter_by_tags,
    filter_by_text,
    filter_pages,
    sort_pages,
)
from aikinote.models import FilterCriteria, TrainingPageRecord


def _record(id, title="", content="", comment="", date="2024-01-01", tags=()):
    return TrainingPageRecord(
        id=id, title=title, content=content, comment=comment, date=date, tags=tuple(tags)
    )


RECORDS = [
    _record("1", "Irimi nage", "basic entry", date="2024-03-02", tags=("入り身投げ", "正面")),
    _record("2", "Kotegaeshi", "wrist turn", "Remember posture", date="2024-03-01", tags=("小手返し",)),
    _record("3", "Shihonage", "four directions", date="2024-03-02", tags=("四方投げ", "正面")),
]


def test_text_matches_title_content_and_comment_case_insensitively():
    assert [r.id for r in filter_by_text(RECORDS, "IRIMI")] == ["1"]
    assert [r.id for r in filter_by_text(RECORDS, "four")] == ["3"]
    assert [r.id for r in filter_by_text(RECORDS, "posture")] == ["2"]


def test_blank_query_is_a_no_op():
    assert filter_by_text(RECORDS, "   ") == RECORDS
    assert filter_by_text(RECORDS, "") == RECORDS


def test_tags_use_and_semantics():
    assert [r.id for r in filter_by_tags(RECORDS, ["正面"])] == ["1", "3"]
    assert [r.id for r in filter_by_tags(RECORDS, ["正面", "四方投げ"])] == ["3"]
    assert filter_by_tags(RECORDS, ["正面", "小手返し"]) == []
    assert filter_by_tags(RECORDS, []) == RECORDS


def test_date_is_exact_match():
    assert [r.id for r in filter_by_date(RECORDS, "2024-03-02")] == ["1", "3"]
    assert filter_by_date(RECORDS, None) == RECORDS


def test_combined_filters_keep_source_order():
    criteria = FilterCriteria(
        search_query="e", selected_date="2024-03-02", selected_tags=("正面",)
    )
    assert [r.id for r in filter_pages(RECORDS, criteria)] == ["1", "3"]


def test_filtering_is_idempotent():
    criteria = FilterCriteria(search_query="a", selected_tags=("正面",))
    once = filter_pages(RECORDS, criteria)
    assert filter_pages(once, criteria) == once


def test_empty_criteria_returns_everything():
    assert filter_pages(RECORDS, FilterCriteria()) == RECORDS


def test_sort_is_stable_within_a_day():
    assert [r.id for r in sort_pages(RECORDS, SORT_NEWEST)] == ["1", "3", "2"]
    assert [r.id for r in sort_pages(RECORDS, SORT_OLDEST)] == ["2", "1", "3"]


def test_sort_rejects_unknown_order():
    with pytest.raises(ValueError):
        sort_pages(RECORDS, "random")


def test_collect_tag_names_dedupes_in_first_seen_order():
    assert collect_tag_names(RECORDS) == ["入り身投げ", "正面", "小手返し", "四方投げ"]
