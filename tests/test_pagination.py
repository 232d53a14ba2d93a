import pytest

from aikinote.models import FilterCriteria
from aikinote.pagination import PaginationWindow


def test_window_grows_one_page_at_a_time():
    window = PaginationWindow(page_size=25)
    items = list(range(60))
    assert len(window.visible(items)) == 25
    assert window.has_more(len(items))
    window.load_more()
    assert len(window.visible(items)) == 50
    window.load_more()
    assert window.visible(items) == items
    assert not window.has_more(len(items))


def test_sync_resets_only_when_criteria_change():
    window = PaginationWindow(page_size=10)
    criteria = FilterCriteria(search_query="iri")
    assert window.sync(criteria) is True
    window.load_more()
    assert window.sync(FilterCriteria(search_query="iri")) is False
    assert window.displayed_items_count == 20
    assert window.sync(FilterCriteria(search_query="irimi")) is True
    assert window.displayed_items_count == 10


def test_count_never_drops_below_page_size():
    window = PaginationWindow(page_size=5)
    window.reset()
    assert window.displayed_items_count == 5
    assert window.visible([1, 2]) == [1, 2]


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        PaginationWindow(page_size=0)


def test_has_more_turns_false_exactly_at_total():
    window = PaginationWindow(page_size=25)
    items = list(range(50))
    assert window.has_more(len(items))
    window.load_more()
    assert window.displayed_items_count == len(items)
    assert not window.has_more(len(items))
    assert window.visible(items) == items
    assert window.has_more(len(items) + 1)
