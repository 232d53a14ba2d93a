import pytest

from aikinote.time_utils import (
    parse_iso,
    resolve_tz,
    to_local_date,
    utc_day_bounds,
)


def test_local_date_crosses_midnight_in_tokyo():
    assert to_local_date("2024-05-01T15:00:00Z", "Asia/Tokyo") == "2024-05-02"
    assert to_local_date("2024-05-01T14:59:59+00:00", "Asia/Tokyo") == "2024-05-01"


def test_naive_timestamps_are_utc():
    assert parse_iso("2024-05-01T00:00:00").utcoffset().total_seconds() == 0


@pytest.mark.parametrize(
    "raw, micro",
    [
        ("2024-05-01T03:00:00.12345+00:00", 123450),
        ("2024-05-01T03:00:00.1Z", 100000),
        ("2024-05-01T03:00:00.123456789+09:00", 123456),
        ("2024-05-01 03:00:00.5", 500000),
    ],
)
def test_postgres_fractional_seconds_of_any_length(raw, micro):
    assert parse_iso(raw).microsecond == micro


def test_five_digit_fraction_keeps_local_date():
    assert to_local_date("2024-05-01T14:59:59.99999+00:00", "Asia/Tokyo") == "2024-05-01"


def test_garbage_timestamp_raises():
    with pytest.raises(ValueError):
        parse_iso("not-a-date")


def test_unknown_zone_falls_back_to_utc():
    assert str(resolve_tz("Mars/Olympus")) == "UTC"
    assert str(resolve_tz(None)) == "UTC"


def test_utc_day_bounds_cover_whole_day():
    start, end = utc_day_bounds("2024-02-29")
    assert start == "2024-02-29T00:00:00+00:00"
    assert end == "2024-02-29T23:59:59.999999+00:00"
