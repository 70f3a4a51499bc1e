"""Feed Merge — verifies ordering, windowing and lenient query parsing.

Tests:
    - Newest first; id breaks timestamp ties; comment beats update on a full tie
    - Windows of size L at 0, L, 2L... concatenate to the full merged sequence
    - limit/offset fall back to defaults on junk; offset over the ceiling is rejected
    - Tag and date parsing are lenient
"""

from datetime import datetime, timedelta, timezone

import pytest

from shelterhub.core.domain_types import FeedType
from shelterhub.core.errors import ValidationFailedError
from shelterhub.core.feed_merge import (
    AnnouncementItem, CommentItem, FeedPage, PageWindow,
    merge_feed, parse_feed_type, parse_iso_datetime, parse_tag_filter,
    resolve_page_window, window,
)

T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _comment(item_id: int, minute: int) -> CommentItem:
    return CommentItem(
        id=item_id, created_at=T0 + timedelta(minutes=minute), author=None,
        content=f"comment {item_id}", animal_id=1, animal_name="Biscuit",
    )


def _update(item_id: int, minute: int) -> AnnouncementItem:
    return AnnouncementItem(
        id=item_id, created_at=T0 + timedelta(minutes=minute), author=None,
        title=f"update {item_id}", content="body",
    )


def _labels(items) -> list[str]:
    return [f"{item.kind.value}:{item.id}" for item in items]


# --- merge_feed ---------------------------------------------------------------

def test_merge_orders_newest_first_across_sources():
    merged = merge_feed([_comment(1, 10), _comment(2, 20)], [_update(1, 15)])
    assert _labels(merged) == ["comment:2", "announcement:1", "comment:1"]


def test_merge_accepts_unsorted_sources():
    merged = merge_feed([_comment(1, 10), _comment(2, 30), _comment(3, 20)], [])
    assert [item.id for item in merged] == [2, 3, 1]


def test_merge_breaks_timestamp_ties_by_id_descending():
    merged = merge_feed([_comment(4, 10), _comment(9, 10)], [_update(6, 10)])
    assert _labels(merged) == ["comment:9", "announcement:6", "comment:4"]


def test_merge_puts_comment_before_update_on_full_tie():
    merged = merge_feed([_update(5, 10)], [_comment(5, 10)])
    assert _labels(merged) == ["comment:5", "announcement:5"]


def test_merge_is_deterministic():
    comments = [_comment(i, i % 4) for i in range(1, 12)]
    updates = [_update(i, i % 3) for i in range(1, 8)]
    assert merge_feed(comments, updates) == merge_feed(list(reversed(comments)), updates)


def test_merge_of_nothing_is_empty():
    assert merge_feed([], []) == []


# --- window -------------------------------------------------------------------

def test_pages_concatenate_without_gaps_or_duplicates():
    merged = merge_feed(
        [_comment(i, i * 2) for i in range(1, 10)],
        [_update(i, i * 3) for i in range(1, 6)],
    )
    pages = [window(merged, PageWindow(limit=4, offset=o)) for o in range(0, 16, 4)]
    assert [item for page in pages for item in page] == merged


def test_window_past_the_end_is_empty():
    assert window([_comment(1, 1)], PageWindow(limit=10, offset=5)) == []


def test_fetch_depth_covers_offset_plus_limit():
    assert PageWindow(limit=20, offset=40).fetch_depth == 60


def test_feed_page_has_more():
    items = [_comment(1, 1), _comment(2, 2)]
    assert FeedPage(items=items, total=5, limit=2, offset=0).has_more is True
    assert FeedPage(items=items, total=4, limit=2, offset=2).has_more is False


# --- resolve_page_window ------------------------------------------------------

def test_defaults_when_absent():
    assert resolve_page_window(None, None) == PageWindow(limit=20, offset=0)


@pytest.mark.parametrize("raw", ["abc", "-5", "0", "", True])
def test_bad_limit_falls_back_to_default(raw):
    assert resolve_page_window(raw, 0).limit == 20


def test_limit_is_capped_at_ceiling():
    assert resolve_page_window("500", 0).limit == 100


@pytest.mark.parametrize("raw", ["abc", "-1", None])
def test_bad_offset_falls_back_to_zero(raw):
    assert resolve_page_window(10, raw).offset == 0


def test_offset_at_ceiling_is_allowed():
    assert resolve_page_window(10, "10000").offset == 10_000


def test_offset_over_ceiling_is_rejected():
    with pytest.raises(ValidationFailedError) as exc_info:
        resolve_page_window(10, "10001")
    assert exc_info.value.field == "offset"
    assert exc_info.value.http_status == 400


# --- parsers ------------------------------------------------------------------

@pytest.mark.parametrize("raw,expected", [
    (None, FeedType.ALL),
    ("", FeedType.ALL),
    ("comments", FeedType.COMMENTS),
    (" Announcements ", FeedType.ANNOUNCEMENTS),
    ("photos", FeedType.ALL),
])
def test_parse_feed_type(raw, expected):
    assert parse_feed_type(raw) is expected


def test_parse_tag_filter_trims_and_dedupes():
    assert parse_tag_filter(" Medical, ,Walk,Medical ") == ["Medical", "Walk"]
    assert parse_tag_filter(None) == []


def test_parse_iso_datetime_accepts_z_suffix():
    assert parse_iso_datetime("2026-03-01T00:00:00Z") == T0


def test_parse_iso_datetime_normalizes_to_utc():
    parsed = parse_iso_datetime("2026-03-01T02:00:00+02:00")
    assert parsed == T0
    assert parsed.utcoffset() == timedelta(0)


def test_parse_iso_datetime_ignores_garbage():
    assert parse_iso_datetime("next tuesday") is None
