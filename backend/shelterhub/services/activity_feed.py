"""Activity Aggregator — one group's comments and updates merged into a single paged feed.

Invariants:
    - Called only after MEMBER authorization (routes enforce order)
    - Comments belong to the group through their animal; updates by group_id
    - Soft-deleted comments, updates, animals and tags never appear
    - Ordering and windowing are delegated to core/feed_merge.py; pagination is applied
      after the merge, never per source
    - total counts every matching row from both sources, not just the fetched ones
    - Read-only

Design Decisions:
    - Each source fetches at most PageWindow.fetch_depth rows in the same order the merge
      uses, so the merged window is exact without loading the whole group history
    - Animal and tag filters narrow comments only; the date range narrows both sources
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.config import Settings, get_settings
from shelterhub.core.domain_types import FeedType, GroupId
from shelterhub.core.feed_merge import (
    AnnouncementItem, CommentItem, FeedAuthor, FeedPage, PageWindow,
    merge_feed, resolve_page_window, window,
)
from shelterhub.models.animal import Animal
from shelterhub.models.animal_comment import AnimalComment, animal_comment_tags
from shelterhub.models.comment_tag import CommentTag
from shelterhub.models.update import Update
from shelterhub.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedFilters:
    animal_id: int | None = None
    tags: list[str] = field(default_factory=list)
    since: datetime | None = None
    until: datetime | None = None


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back naive; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _author(user: User | None) -> FeedAuthor | None:
    if user is None:
        return None
    return FeedAuthor(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )


class ActivityAggregator:
    """Builds FeedPages for a single group."""

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    async def get_feed(
        self,
        group_id: GroupId,
        type_filter: FeedType = FeedType.ALL,
        limit: object = None,
        offset: object = None,
        filters: FeedFilters | None = None,
    ) -> FeedPage:
        page = resolve_page_window(
            limit, offset,
            default_limit=self.settings.feed_default_limit,
            max_limit=self.settings.feed_max_limit,
            max_offset=self.settings.feed_max_offset,
        )
        filters = filters or FeedFilters()

        comments: list[CommentItem] = []
        updates: list[AnnouncementItem] = []
        total = 0
        if type_filter in (FeedType.ALL, FeedType.COMMENTS):
            comments, count = await self._fetch_comments(group_id, page, filters)
            total += count
        if type_filter in (FeedType.ALL, FeedType.ANNOUNCEMENTS):
            updates, count = await self._fetch_updates(group_id, page, filters)
            total += count

        items = window(merge_feed(comments, updates), page)
        logger.debug(
            f"Feed built: {len(items)} of {total} items",
            extra={"group_id": group_id},
        )
        return FeedPage(items=items, total=total, limit=page.limit, offset=page.offset)

    # ─── Sources ──────────────────────────────────────────────────

    def _comment_conditions(self, group_id: GroupId, filters: FeedFilters) -> list:
        conditions = [
            Animal.group_id == group_id,
            Animal.deleted_at.is_(None),
            AnimalComment.deleted_at.is_(None),
        ]
        if filters.animal_id is not None:
            conditions.append(AnimalComment.animal_id == filters.animal_id)
        if filters.since is not None:
            conditions.append(AnimalComment.created_at >= filters.since)
        if filters.until is not None:
            conditions.append(AnimalComment.created_at <= filters.until)
        if filters.tags:
            tagged = (
                select(animal_comment_tags.c.animal_comment_id)
                .join(CommentTag, CommentTag.id == animal_comment_tags.c.comment_tag_id)
                .where(CommentTag.name.in_(filters.tags))
                .where(CommentTag.deleted_at.is_(None))
            )
            conditions.append(AnimalComment.id.in_(tagged))
        return conditions

    async def _fetch_comments(
        self, group_id: GroupId, page: PageWindow, filters: FeedFilters,
    ) -> tuple[list[CommentItem], int]:
        conditions = self._comment_conditions(group_id, filters)

        total = await self.db.scalar(
            select(func.count(AnimalComment.id))
            .join(Animal, Animal.id == AnimalComment.animal_id)
            .where(*conditions)
        )
        result = await self.db.execute(
            select(AnimalComment, Animal.name)
            .join(Animal, Animal.id == AnimalComment.animal_id)
            .where(*conditions)
            .order_by(AnimalComment.created_at.desc(), AnimalComment.id.desc())
            .limit(page.fetch_depth)
        )
        items = [
            CommentItem(
                id=comment.id,
                created_at=_aware(comment.created_at),
                author=_author(comment.author),
                content=comment.content,
                animal_id=comment.animal_id,
                animal_name=animal_name,
                image_url=comment.image_url,
                tags=tuple(tag.name for tag in comment.tags if tag.deleted_at is None),
            )
            for comment, animal_name in result.all()
        ]
        return items, total or 0

    async def _fetch_updates(
        self, group_id: GroupId, page: PageWindow, filters: FeedFilters,
    ) -> tuple[list[AnnouncementItem], int]:
        conditions = [Update.group_id == group_id, Update.deleted_at.is_(None)]
        if filters.since is not None:
            conditions.append(Update.created_at >= filters.since)
        if filters.until is not None:
            conditions.append(Update.created_at <= filters.until)

        total = await self.db.scalar(select(func.count(Update.id)).where(*conditions))
        result = await self.db.execute(
            select(Update)
            .where(*conditions)
            .order_by(Update.created_at.desc(), Update.id.desc())
            .limit(page.fetch_depth)
        )
        items = [
            AnnouncementItem(
                id=update.id,
                created_at=_aware(update.created_at),
                author=_author(update.author),
                title=update.title,
                content=update.content,
                image_url=update.image_url,
            )
            for update in result.scalars().all()
        ]
        return items, total or 0
