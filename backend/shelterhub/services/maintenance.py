"""Maintenance — operator-triggered hard deletion of long soft-deleted rows.

Invariants:
    - Only whitelisted tables can be purged; the table name never reaches SQL as text
    - Only rows whose deleted_at is older than `days` are removed; live rows never are
    - days below the floor (or unparseable) fall back to the default
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.config import Settings, get_settings
from shelterhub.core.errors import ValidationFailedError
from shelterhub.models.animal import Animal
from shelterhub.models.animal_comment import AnimalComment
from shelterhub.models.announcement import Announcement
from shelterhub.models.comment_tag import CommentTag
from shelterhub.models.group import Group
from shelterhub.models.update import Update
from shelterhub.models.user import User
from shelterhub.models.user_skill_tag import UserSkillTag

logger = logging.getLogger(__name__)

PURGEABLE_TABLES = {
    model.__tablename__: model
    for model in (
        AnimalComment, Animal, Announcement, CommentTag,
        Group, Update, UserSkillTag, User,
    )
}


def resolve_retention_days(raw: object, settings: Settings | None = None) -> int:
    settings = settings or get_settings()
    try:
        days = int(str(raw).strip()) if raw is not None else None
    except ValueError:
        days = None
    if days is None or days < settings.cleanup_min_days:
        return settings.cleanup_default_days
    return days


async def purge_soft_deleted(
    db: AsyncSession, table: str, days: int, now: datetime | None = None,
) -> int:
    """Hard-delete rows of `table` soft-deleted more than `days` ago. Returns the count."""
    model = PURGEABLE_TABLES.get(table)
    if model is None:
        raise ValidationFailedError(
            "Invalid table name",
            field="table",
            details={"allowed": sorted(PURGEABLE_TABLES)},
        )
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    result = await db.execute(
        delete(model)
        .where(model.deleted_at.is_not(None))
        .where(model.deleted_at < cutoff)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    deleted = result.rowcount or 0
    logger.info(
        "Soft-deleted records purged",
        extra={"table": table, "days": days, "deleted_count": deleted},
    )
    return deleted
