from datetime import datetime, timedelta, timezone

import pytest

from civic.access.errors import InvalidVisibilityShapeError
from civic.access.publication import is_live, validate_window
from tests.access_helpers import NOW, make_item


def test_item_without_window_is_always_live():
    assert is_live(make_item(), NOW)


def test_window_is_closed_on_both_ends():
    item = make_item(start_at=NOW - timedelta(hours=1), end_at=NOW + timedelta(hours=1))

    assert is_live(item, item.start_at)
    assert is_live(item, item.end_at)
    assert not is_live(item, item.start_at - timedelta(microseconds=1))
    assert not is_live(item, item.end_at + timedelta(microseconds=1))


def test_instantaneous_window_is_live_at_that_instant_only():
    item = make_item(start_at=NOW, end_at=NOW)

    assert is_live(item, NOW)
    assert not is_live(item, NOW + timedelta(seconds=1))


def test_open_ended_bounds():
    scheduled = make_item(start_at=NOW + timedelta(days=1))
    until_tonight = make_item(end_at=NOW + timedelta(hours=8))

    assert not is_live(scheduled, NOW)
    assert is_live(until_tonight, NOW)


def test_naive_now_is_read_as_utc():
    item = make_item(start_at=NOW)

    assert is_live(item, NOW.replace(tzinfo=None))
    assert not is_live(item, (NOW - timedelta(seconds=1)).replace(tzinfo=None))


def test_offset_instants_compare_by_absolute_time():
    item = make_item(end_at=NOW)
    same_instant_elsewhere = NOW.astimezone(timezone(timedelta(hours=3)))

    assert is_live(item, same_instant_elsewhere)


def test_inverted_window_is_rejected():
    with pytest.raises(InvalidVisibilityShapeError) as exc_info:
        validate_window(NOW, NOW - timedelta(seconds=1))
    assert exc_info.value.reason == "window_inverted"


def test_half_open_windows_are_valid():
    validate_window(None, NOW)
    validate_window(NOW, None)
    validate_window(datetime(2025, 1, 1, tzinfo=timezone.utc), NOW)
