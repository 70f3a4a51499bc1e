"""Feed Merge — pure ordering, windowing and parameter parsing for the group activity feed.

Invariants:
    - Merged order: created_at DESC, then id DESC, then kind (comment before announcement)
    - Pagination is applied to the merged sequence, never per source
    - limit in [1, max_limit]; offset in [0, max_offset]
    - Bad limit/offset text falls back to defaults; only an offset beyond max_offset fails
    - Unknown feed type text means FeedType.ALL

Design Decisions:
    - Frozen dataclasses with a shared sort_key instead of one class with optional fields:
      each kind carries only what it has
    - Sources only need to supply their first offset+limit rows (PageWindow.fetch_depth):
      the merged window can never reach deeper into either source
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from heapq import merge
from typing import ClassVar, Iterable, Union

from shelterhub.core.domain_types import FeedItemKind, FeedType
from shelterhub.core.errors import ValidationFailedError


@dataclass(frozen=True)
class FeedAuthor:
    id: int
    username: str
    first_name: str = ""
    last_name: str = ""


@dataclass(frozen=True)
class CommentItem:
    """A comment left on one of the group's animals."""
    kind: ClassVar[FeedItemKind] = FeedItemKind.COMMENT

    id: int
    created_at: datetime
    author: FeedAuthor | None
    content: str
    animal_id: int
    animal_name: str
    image_url: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def sort_key(self) -> tuple:
        return (self.created_at, self.id, _KIND_RANK[self.kind])


@dataclass(frozen=True)
class AnnouncementItem:
    """A group update posted by a member."""
    kind: ClassVar[FeedItemKind] = FeedItemKind.ANNOUNCEMENT

    id: int
    created_at: datetime
    author: FeedAuthor | None
    title: str
    content: str
    image_url: str = ""

    @property
    def sort_key(self) -> tuple:
        return (self.created_at, self.id, _KIND_RANK[self.kind])


FeedItem = Union[CommentItem, AnnouncementItem]

# Higher rank sorts first on a full (created_at, id) tie.
_KIND_RANK = {
    FeedItemKind.COMMENT: 1,
    FeedItemKind.ANNOUNCEMENT: 0,
}


@dataclass(frozen=True)
class PageWindow:
    limit: int
    offset: int

    @property
    def fetch_depth(self) -> int:
        """Rows each source must supply so the merged window is exact."""
        return self.offset + self.limit


@dataclass(frozen=True)
class FeedPage:
    items: list[FeedItem]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total


def merge_feed(*sources: Iterable[FeedItem]) -> list[FeedItem]:
    """Merge any number of sources into one newest-first sequence."""
    ordered = [
        sorted(source, key=lambda item: item.sort_key, reverse=True)
        for source in sources
    ]
    return list(merge(*ordered, key=lambda item: item.sort_key, reverse=True))


def window(items: list[FeedItem], page: PageWindow) -> list[FeedItem]:
    """Slice the merged sequence. Offsets past the end yield an empty page."""
    return items[page.offset:page.offset + page.limit]


def parse_feed_type(raw: str | None) -> FeedType:
    if not raw:
        return FeedType.ALL
    try:
        return FeedType(raw.strip().lower())
    except ValueError:
        return FeedType.ALL


def _parse_int(raw: object) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def resolve_page_window(
    limit_raw: object,
    offset_raw: object,
    default_limit: int = 20,
    max_limit: int = 100,
    max_offset: int = 10_000,
) -> PageWindow:
    """Turn raw query values into a bounded window."""
    limit = _parse_int(limit_raw)
    if limit is None or limit <= 0:
        limit = default_limit
    limit = min(limit, max_limit)

    offset = _parse_int(offset_raw)
    if offset is None or offset < 0:
        offset = 0
    if offset > max_offset:
        raise ValidationFailedError(
            f"offset must not exceed {max_offset}",
            field="offset",
            details={"max_offset": max_offset, "received": offset},
        )
    return PageWindow(limit=limit, offset=offset)


def parse_tag_filter(raw: str | None) -> list[str]:
    """Comma-separated tag names, trimmed, empties dropped, order kept."""
    if not raw:
        return []
    seen: dict[str, None] = {}
    for part in raw.split(","):
        name = part.strip()
        if name:
            seen.setdefault(name, None)
    return list(seen)


def parse_iso_datetime(raw: str | None) -> datetime | None:
    """Lenient ISO-8601 parse; unparseable input means "no bound". Naive values are UTC."""
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
