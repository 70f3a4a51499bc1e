"""Posts — group updates and site-wide announcements.

Invariants:
    - Updates are group-scoped (MEMBER to post or delete); announcements are global
      (site admin to post or delete)
    - Rows are committed before any email is dispatched; dispatch failures never
      undo a post, and neither does a failed recipient lookup
    - Deletion is soft
"""

import logging
from typing import Awaitable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.core.domain_types import GroupId, UserId
from shelterhub.models.announcement import Announcement
from shelterhub.models.update import Update
from shelterhub.services.announcement_outbox import (
    AnnouncementOutbox, group_opted_in_addresses, opted_in_addresses,
)

logger = logging.getLogger(__name__)

RECENT_ANNOUNCEMENTS_LIMIT = 10


class PostService:
    def __init__(self, db: AsyncSession, outbox: AnnouncementOutbox):
        self.db = db
        self.outbox = outbox

    async def create_update(
        self,
        group_id: GroupId,
        author_id: UserId,
        title: str,
        content: str,
        image_url: str = "",
        send_email: bool = False,
    ) -> Update:
        update = Update(
            group_id=group_id,
            user_id=author_id,
            title=title,
            content=content,
            image_url=image_url,
            send_email=send_email,
        )
        self.db.add(update)
        await self.db.commit()
        await self.db.refresh(update, attribute_names=["author"])
        logger.info(
            f"Update posted: {update.id}",
            extra={"user_id": author_id, "group_id": group_id},
        )
        if send_email:
            await self._notify(
                group_opted_in_addresses(self.db, group_id), title, content,
                user_id=author_id, group_id=group_id,
            )
        return update

    async def delete_update(self, update: Update) -> None:
        update.soft_delete()
        await self.db.commit()

    async def recent_announcements(self) -> list[Announcement]:
        result = await self.db.execute(
            select(Announcement)
            .where(Announcement.deleted_at.is_(None))
            .order_by(Announcement.created_at.desc(), Announcement.id.desc())
            .limit(RECENT_ANNOUNCEMENTS_LIMIT)
        )
        return list(result.scalars().all())

    async def create_announcement(
        self, author_id: UserId, title: str, content: str, send_email: bool = False,
    ) -> Announcement:
        announcement = Announcement(
            user_id=author_id, title=title, content=content, send_email=send_email,
        )
        self.db.add(announcement)
        await self.db.commit()
        await self.db.refresh(announcement, attribute_names=["author"])
        logger.info(f"Announcement posted: {announcement.id}", extra={"user_id": author_id})
        if send_email:
            await self._notify(
                opted_in_addresses(self.db), title, content, user_id=author_id,
            )
        return announcement

    async def get_announcement(self, announcement_id: int) -> Announcement | None:
        result = await self.db.execute(
            select(Announcement)
            .where(Announcement.id == announcement_id)
            .where(Announcement.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def delete_announcement(self, announcement: Announcement) -> None:
        announcement.soft_delete()
        await self.db.commit()

    async def _notify(
        self, recipients: Awaitable[list[str]], title: str, content: str, **log_extra,
    ) -> None:
        """Hand the post to the outbox; the post is already committed, so a failed
        recipient lookup is logged and the email skipped."""
        try:
            addresses = await recipients
        except Exception as e:
            logger.warning(f"Recipient lookup failed, email skipped: {e}", extra=log_extra)
            return
        self.outbox.dispatch(addresses, title, content)
