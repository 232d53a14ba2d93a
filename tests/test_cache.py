from aikinote.cache import QueryCache, cache_key
from aikinote.result import Err, Ok


def test_ok_results_are_served_until_ttl_expires(clock):
    cache = QueryCache(clock=clock)
    calls = []

    def loader():
        calls.append(1)
        return Ok(len(calls))

    assert cache.get_or_load("pages:getList", {"u": 1}, 5, loader) == Ok(1)
    clock.advance(4.9)
    assert cache.get_or_load("pages:getList", {"u": 1}, 5, loader) == Ok(1)
    clock.advance(0.2)
    assert cache.get_or_load("pages:getList", {"u": 1}, 5, loader) == Ok(2)


def test_errors_are_not_cached(clock):
    cache = QueryCache(clock=clock)
    assert cache.get_or_load("tags:getList", {}, 8, lambda: Err("x")) == Err("x")
    assert len(cache) == 0


def test_invalidate_by_prefix():
    cache = QueryCache()
    cache.get_or_load("pages:getList", {"a": 1}, 5, lambda: Ok(1))
    cache.get_or_load("pages:getById", {"a": 1}, 5, lambda: Ok(2))
    cache.get_or_load("tags:getList", {"a": 1}, 5, lambda: Ok(3))
    assert cache.invalidate(["pages:"]) == 2
    assert len(cache) == 1


def test_cache_key_ignores_param_order():
    assert cache_key("s", {"a": 1, "b": 2}) == cache_key("s", {"b": 2, "a": 1})


def test_expired_entries_are_dropped_on_next_lookup(clock):
    cache = QueryCache(clock=clock)
    for user in ("u1", "u2", "u3"):
        cache.get_or_load("pages:getList", {"user": user}, 5, lambda: Ok([]))
    assert len(cache) == 3
    clock.advance(6)
    cache.get_or_load("tags:getList", {"user": "u1"}, 8, lambda: Ok([]))
    assert len(cache) == 1
