import pytest

from aikinote.result import BackendError, Err, Ok, from_envelope, unwrap


def test_from_envelope_maps_success_and_failure():
    assert from_envelope({"success": True, "data": [1]}) == Ok([1])
    assert from_envelope({"success": False, "error": "nope"}) == Err("nope")


def test_from_envelope_rejects_malformed_input():
    with pytest.raises(TypeError):
        from_envelope({"data": []})
    with pytest.raises(TypeError):
        from_envelope({"success": "yes"})


def test_unwrap_raises_with_fallback_message():
    assert unwrap(Ok(3)) == 3
    with pytest.raises(BackendError, match="boom"):
        unwrap(Err("boom"))
    with pytest.raises(BackendError, match="fallback"):
        unwrap(Err(""), "fallback")


def test_envelopes_round_trip_shape():
    assert Ok({"a": 1}).to_envelope() == {"success": True, "data": {"a": 1}}
    assert Err("x").to_envelope() == {"success": False, "error": "x"}
