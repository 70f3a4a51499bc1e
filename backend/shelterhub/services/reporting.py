"""Reporting Aggregator — cross-group statistics for the site-admin dashboard and
operator rollups (per group, per user, per comment tag).

Invariants:
    - Dashboard, group and user rollups are site-admin only (caller enforces via
      require_site_admin); comment-tag rollups are limited by the caller to the
      groups it may read
    - Soft-deleted users, groups, animals, comments and tags are excluded everywhere
    - System tags are detected by CommentTag.is_system only, never by name
    - Every ordering has a total tie-break, so a fixed snapshot gives a fixed result
    - Each sub-statistic is its own read; store errors propagate as DatabaseError
    - Rollups page by primary key with the feed's window rules (limit capped,
      offset bounded)

Design Decisions:
    - All windows derive from one `now` (core/report_windows.py) so sections agree
    - Alert tags are collected as a set of distinct names, sorted, instead of a
      driver-specific string aggregate
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.config import Settings, get_settings
from shelterhub.core.feed_merge import PageWindow, resolve_page_window
from shelterhub.core.report_windows import (
    ACTIVE_GROUPS_LIMIT, ACTIVITY_WINDOW_DAYS, ATTENTION_ANIMALS_LIMIT,
    RECENT_USERS_LIMIT, ReportWindows, average_per_day, report_windows,
)
from shelterhub.models.animal import Animal
from shelterhub.models.animal_comment import AnimalComment, animal_comment_tags
from shelterhub.models.comment_tag import CommentTag
from shelterhub.models.group import Group
from shelterhub.models.user import User
from shelterhub.models.user_group import UserGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecentUser:
    id: int
    username: str
    email: str
    is_admin: bool
    created_at: datetime


@dataclass(frozen=True)
class ActiveGroup:
    group_id: int
    group_name: str
    user_count: int
    animal_count: int
    comment_count: int
    last_activity: datetime | None


@dataclass(frozen=True)
class AnimalAlert:
    animal_id: int
    animal_name: str
    group_id: int
    group_name: str
    image_url: str
    alert_tags: list[str]
    last_comment: datetime


@dataclass(frozen=True)
class SystemHealth:
    active_users_last_24h: int = 0
    comments_last_24h: int = 0
    new_users_last_7_days: int = 0
    average_comments_per_day: float = 0.0


@dataclass(frozen=True)
class DashboardStats:
    total_users: int = 0
    total_groups: int = 0
    total_animals: int = 0
    total_comments: int = 0
    recent_users: list[RecentUser] = field(default_factory=list)
    most_active_groups: list[ActiveGroup] = field(default_factory=list)
    animals_needing_attention: list[AnimalAlert] = field(default_factory=list)
    system_health: SystemHealth = field(default_factory=SystemHealth)


@dataclass(frozen=True)
class GroupStatistics:
    group_id: int
    group_name: str
    user_count: int
    animal_count: int
    last_activity: datetime | None


@dataclass(frozen=True)
class UserStatistics:
    user_id: int
    username: str
    comment_count: int
    last_active: datetime | None
    animals_interacted_with: int


@dataclass(frozen=True)
class CommentTagStatistics:
    tag_id: int
    tag_name: str
    group_id: int
    usage_count: int
    last_used: datetime | None
    most_tagged_animal_id: int | None
    most_tagged_animal_name: str | None


@dataclass(frozen=True)
class StatisticsPage:
    items: list
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ReportingAggregator:
    """Computes DashboardStats and the paged rollups from the live store."""

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    async def get_dashboard_stats(self, now: datetime | None = None) -> DashboardStats:
        windows = report_windows(now)
        stats = DashboardStats(
            total_users=await self._count_live(User),
            total_groups=await self._count_live(Group),
            total_animals=await self._count_live(Animal),
            total_comments=await self._count_live(AnimalComment),
            recent_users=await self._recent_users(),
            most_active_groups=await self._most_active_groups(windows),
            animals_needing_attention=await self._animals_needing_attention(),
            system_health=await self._system_health(windows),
        )
        logger.info("Dashboard stats computed")
        return stats

    async def _count_live(self, model) -> int:
        total = await self.db.scalar(
            select(func.count(model.id)).where(model.deleted_at.is_(None)),
        )
        return total or 0

    async def _recent_users(self) -> list[RecentUser]:
        result = await self.db.execute(
            select(User)
            .where(User.deleted_at.is_(None))
            .order_by(User.created_at.desc(), User.id.desc())
            .limit(RECENT_USERS_LIMIT)
        )
        return [
            RecentUser(
                id=user.id,
                username=user.username,
                email=user.email,
                is_admin=user.is_admin,
                created_at=_aware(user.created_at),
            )
            for user in result.scalars().all()
        ]

    async def _most_active_groups(self, windows: ReportWindows) -> list[ActiveGroup]:
        comment_count = func.count(AnimalComment.id).label("comment_count")
        windowed = (
            select(Animal.group_id.label("group_id"), comment_count)
            .join(Animal, Animal.id == AnimalComment.animal_id)
            .where(AnimalComment.deleted_at.is_(None))
            .where(Animal.deleted_at.is_(None))
            .where(AnimalComment.created_at > windows.last_30_days)
            .group_by(Animal.group_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Group.id, Group.name, windowed.c.comment_count)
            .select_from(Group)
            .join(windowed, windowed.c.group_id == Group.id)
            .where(Group.deleted_at.is_(None))
            .order_by(windowed.c.comment_count.desc(), Group.id.asc())
            .limit(ACTIVE_GROUPS_LIMIT)
        )
        top = result.all()
        if not top:
            return []
        group_ids = [row[0] for row in top]

        member_counts = await self._member_counts(group_ids)
        animal_counts = await self._animal_counts(group_ids)
        last_activity = await self._last_activity(group_ids)

        return [
            ActiveGroup(
                group_id=group_id,
                group_name=name,
                user_count=member_counts.get(group_id, 0),
                animal_count=animal_counts.get(group_id, 0),
                comment_count=count,
                last_activity=_aware(last_activity.get(group_id)),
            )
            for group_id, name, count in top
        ]

    async def _member_counts(self, group_ids: list[int]) -> dict[int, int]:
        result = await self.db.execute(
            select(UserGroup.group_id, func.count(UserGroup.user_id))
            .join(User, User.id == UserGroup.user_id)
            .where(User.deleted_at.is_(None))
            .where(UserGroup.group_id.in_(group_ids))
            .group_by(UserGroup.group_id)
        )
        return dict(result.all())

    async def _animal_counts(self, group_ids: list[int]) -> dict[int, int]:
        result = await self.db.execute(
            select(Animal.group_id, func.count(Animal.id))
            .where(Animal.deleted_at.is_(None))
            .where(Animal.group_id.in_(group_ids))
            .group_by(Animal.group_id)
        )
        return dict(result.all())

    async def _last_activity(self, group_ids: list[int]) -> dict[int, datetime]:
        """Latest live comment on each group's live animals, all time."""
        result = await self.db.execute(
            select(Animal.group_id, func.max(AnimalComment.created_at))
            .join(Animal, Animal.id == AnimalComment.animal_id)
            .where(AnimalComment.deleted_at.is_(None))
            .where(Animal.deleted_at.is_(None))
            .where(Animal.group_id.in_(group_ids))
            .group_by(Animal.group_id)
        )
        return dict(result.all())

    def _system_tagged(self, statement):
        return (
            statement
            .join(Animal, Animal.id == AnimalComment.animal_id)
            .join(Group, Group.id == Animal.group_id)
            .join(
                animal_comment_tags,
                animal_comment_tags.c.animal_comment_id == AnimalComment.id,
            )
            .join(CommentTag, CommentTag.id == animal_comment_tags.c.comment_tag_id)
            .where(CommentTag.is_system.is_(True))
            .where(CommentTag.deleted_at.is_(None))
            .where(AnimalComment.deleted_at.is_(None))
            .where(Animal.deleted_at.is_(None))
            .where(Group.deleted_at.is_(None))
        )

    async def _animals_needing_attention(self) -> list[AnimalAlert]:
        last_comment = func.max(AnimalComment.created_at).label("last_comment")
        result = await self.db.execute(
            self._system_tagged(
                select(
                    Animal.id, Animal.name, Animal.image_url,
                    Group.id, Group.name, last_comment,
                ).select_from(AnimalComment)
            )
            .group_by(Animal.id, Animal.name, Animal.image_url, Group.id, Group.name)
            .order_by(last_comment.desc(), Animal.id.asc())
            .limit(ATTENTION_ANIMALS_LIMIT)
        )
        flagged = result.all()
        if not flagged:
            return []

        animal_ids = [row[0] for row in flagged]
        tag_rows = await self.db.execute(
            self._system_tagged(
                select(AnimalComment.animal_id, CommentTag.name)
                .select_from(AnimalComment)
                .distinct()
            ).where(AnimalComment.animal_id.in_(animal_ids))
        )
        tags_by_animal: dict[int, set[str]] = defaultdict(set)
        for animal_id, tag_name in tag_rows.all():
            tags_by_animal[animal_id].add(tag_name)

        return [
            AnimalAlert(
                animal_id=animal_id,
                animal_name=animal_name,
                group_id=group_id,
                group_name=group_name,
                image_url=image_url,
                alert_tags=sorted(tags_by_animal[animal_id]),
                last_comment=_aware(last),
            )
            for animal_id, animal_name, image_url, group_id, group_name, last in flagged
        ]

    async def _system_health(self, windows: ReportWindows) -> SystemHealth:
        live_comments = AnimalComment.deleted_at.is_(None)
        active_users = await self.db.scalar(
            select(func.count(distinct(AnimalComment.user_id)))
            .where(live_comments)
            .where(AnimalComment.created_at > windows.last_24h)
        )
        comments_24h = await self.db.scalar(
            select(func.count(AnimalComment.id))
            .where(live_comments)
            .where(AnimalComment.created_at > windows.last_24h)
        )
        new_users = await self.db.scalar(
            select(func.count(User.id))
            .where(User.deleted_at.is_(None))
            .where(User.created_at > windows.last_7_days)
        )
        comments_30d = await self.db.scalar(
            select(func.count(AnimalComment.id))
            .where(live_comments)
            .where(AnimalComment.created_at > windows.last_30_days)
        )
        return SystemHealth(
            active_users_last_24h=active_users or 0,
            comments_last_24h=comments_24h or 0,
            new_users_last_7_days=new_users or 0,
            average_comments_per_day=average_per_day(comments_30d or 0, ACTIVITY_WINDOW_DAYS),
        )

    # ─── Paged Rollups ────────────────────────────────────────────

    def _page(self, limit: object, offset: object) -> PageWindow:
        return resolve_page_window(
            limit, offset,
            default_limit=self.settings.feed_default_limit,
            max_limit=self.settings.feed_max_limit,
            max_offset=self.settings.feed_max_offset,
        )

    async def group_statistics(
        self, limit: object = None, offset: object = None,
    ) -> StatisticsPage:
        """Member, animal and last-activity counts for every live group, by id."""
        page = self._page(limit, offset)
        total = await self._count_live(Group)
        result = await self.db.execute(
            select(Group.id, Group.name)
            .where(Group.deleted_at.is_(None))
            .order_by(Group.id)
            .limit(page.limit)
            .offset(page.offset)
        )
        rows = result.all()
        group_ids = [row[0] for row in rows]
        if not group_ids:
            return StatisticsPage([], total, page.limit, page.offset)

        member_counts = await self._member_counts(group_ids)
        animal_counts = await self._animal_counts(group_ids)
        last_activity = await self._last_activity(group_ids)
        items = [
            GroupStatistics(
                group_id=group_id,
                group_name=name,
                user_count=member_counts.get(group_id, 0),
                animal_count=animal_counts.get(group_id, 0),
                last_activity=_aware(last_activity.get(group_id)),
            )
            for group_id, name in rows
        ]
        return StatisticsPage(items, total, page.limit, page.offset)

    async def user_statistics(
        self, limit: object = None, offset: object = None,
    ) -> StatisticsPage:
        """Comment activity per live user, by id."""
        page = self._page(limit, offset)
        total = await self._count_live(User)
        result = await self.db.execute(
            select(User.id, User.username)
            .where(User.deleted_at.is_(None))
            .order_by(User.id)
            .limit(page.limit)
            .offset(page.offset)
        )
        rows = result.all()
        user_ids = [row[0] for row in rows]
        if not user_ids:
            return StatisticsPage([], total, page.limit, page.offset)

        activity = await self.db.execute(
            select(
                AnimalComment.user_id,
                func.count(AnimalComment.id),
                func.max(AnimalComment.created_at),
                func.count(distinct(AnimalComment.animal_id)),
            )
            .join(Animal, Animal.id == AnimalComment.animal_id)
            .where(AnimalComment.deleted_at.is_(None))
            .where(Animal.deleted_at.is_(None))
            .where(AnimalComment.user_id.in_(user_ids))
            .group_by(AnimalComment.user_id)
        )
        by_user = {row[0]: row[1:] for row in activity.all()}
        items = []
        for user_id, username in rows:
            comments, last_active, animals = by_user.get(user_id, (0, None, 0))
            items.append(UserStatistics(
                user_id=user_id,
                username=username,
                comment_count=comments,
                last_active=_aware(last_active),
                animals_interacted_with=animals,
            ))
        return StatisticsPage(items, total, page.limit, page.offset)

    async def comment_tag_statistics(
        self,
        limit: object = None,
        offset: object = None,
        group_ids: list[int] | None = None,
    ) -> StatisticsPage:
        """Usage of live comment tags, by tag id.

        `group_ids=None` covers every group. The most-tagged animal is the one with
        the most tagged comments, ties going to the lower animal id.
        """
        page = self._page(limit, offset)
        scope = [
            CommentTag.deleted_at.is_(None),
            CommentTag.group_id.in_(select(Group.id).where(Group.deleted_at.is_(None))),
        ]
        if group_ids is not None:
            scope.append(CommentTag.group_id.in_(group_ids))
        total = await self.db.scalar(select(func.count(CommentTag.id)).where(*scope)) or 0
        result = await self.db.execute(
            select(CommentTag.id, CommentTag.name, CommentTag.group_id)
            .where(*scope)
            .order_by(CommentTag.id)
            .limit(page.limit)
            .offset(page.offset)
        )
        rows = result.all()
        tag_ids = [row[0] for row in rows]
        if not tag_ids:
            return StatisticsPage([], total, page.limit, page.offset)

        tag_id_col = animal_comment_tags.c.comment_tag_id
        uses = func.count(AnimalComment.id)
        usage = await self.db.execute(
            select(tag_id_col, Animal.id, Animal.name, uses, func.max(AnimalComment.created_at))
            .select_from(animal_comment_tags)
            .join(AnimalComment, AnimalComment.id == animal_comment_tags.c.animal_comment_id)
            .join(Animal, Animal.id == AnimalComment.animal_id)
            .where(AnimalComment.deleted_at.is_(None))
            .where(Animal.deleted_at.is_(None))
            .where(tag_id_col.in_(tag_ids))
            .group_by(tag_id_col, Animal.id, Animal.name)
            .order_by(tag_id_col, uses.desc(), Animal.id.asc())
        )
        per_animal: dict[int, list[tuple]] = defaultdict(list)
        for tag_id, animal_id, animal_name, count, last in usage.all():
            per_animal[tag_id].append((animal_id, animal_name, count, _aware(last)))

        items = []
        for tag_id, name, group_id in rows:
            animals = per_animal.get(tag_id, [])
            top = animals[0] if animals else (None, None, 0, None)
            items.append(CommentTagStatistics(
                tag_id=tag_id,
                tag_name=name,
                group_id=group_id,
                usage_count=sum(entry[2] for entry in animals),
                last_used=max((entry[3] for entry in animals), default=None),
                most_tagged_animal_id=top[0],
                most_tagged_animal_name=top[1],
            ))
        return StatisticsPage(items, total, page.limit, page.offset)
