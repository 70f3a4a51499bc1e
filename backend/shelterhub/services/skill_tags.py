"""Skill-Tag Reconciler — group-scoped skill tags and all-or-nothing member assignment.

Invariants:
    - Callers hold GROUP_ADMIN on the group for every write (routes enforce)
    - set_user_skill_tags validates everything before the first write: a rejected
      request leaves the member's tags untouched
    - After success the member's tag set for the group equals exactly the requested
      set; assignments in other groups are never touched
    - Idempotent: applying the same request twice yields the same state
    - Deleting a tag removes its assignments and soft-deletes it in one commit

Design Decisions:
    - Ownership rules live in core/skill_tag_rules.py; this module does the IO
    - Replacement is delete-then-insert scoped to the group's tag ids, committed once
"""

import logging
from collections import defaultdict

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.core.domain_types import GroupId, UserId
from shelterhub.core.errors import ResourceNotFoundError, ValidationFailedError
from shelterhub.core.skill_tag_rules import check_tag_ownership, dedupe_tag_ids
from shelterhub.models.user_skill_tag import UserSkillTag, user_skill_tag_assignments
from shelterhub.services.membership_store import SqlMembershipStore

logger = logging.getLogger(__name__)


class SkillTagReconciler:
    """Reads and writes one group's skill tags."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _live_tags(self, group_id: GroupId):
        return (
            select(UserSkillTag)
            .where(UserSkillTag.group_id == group_id)
            .where(UserSkillTag.deleted_at.is_(None))
        )

    async def list_tags(self, group_id: GroupId) -> list[UserSkillTag]:
        result = await self.db.execute(
            self._live_tags(group_id).order_by(UserSkillTag.name, UserSkillTag.id),
        )
        return list(result.scalars().all())

    async def get_tag(self, group_id: GroupId, tag_id: int) -> UserSkillTag:
        result = await self.db.execute(
            self._live_tags(group_id).where(UserSkillTag.id == tag_id),
        )
        tag = result.scalar_one_or_none()
        if not tag:
            raise ResourceNotFoundError("SkillTag", tag_id)
        return tag

    async def create_tag(self, group_id: GroupId, name: str, color: str) -> UserSkillTag:
        tag = UserSkillTag(group_id=group_id, name=name, color=color)
        self.db.add(tag)
        await self.db.commit()
        await self.db.refresh(tag)
        logger.info(f"Skill tag created: {tag.id}", extra={"group_id": group_id})
        return tag

    async def update_tag(
        self, group_id: GroupId, tag_id: int, name: str, color: str,
    ) -> UserSkillTag:
        tag = await self.get_tag(group_id, tag_id)
        tag.name = name
        tag.color = color
        await self.db.commit()
        return tag

    async def delete_tag(self, group_id: GroupId, tag_id: int) -> None:
        tag = await self.get_tag(group_id, tag_id)
        await self.db.execute(
            delete(user_skill_tag_assignments)
            .where(user_skill_tag_assignments.c.user_skill_tag_id == tag.id)
        )
        tag.soft_delete()
        await self.db.commit()
        logger.info(f"Skill tag deleted: {tag_id}", extra={"group_id": group_id})

    async def tags_for_users(
        self, group_id: GroupId, user_ids: list[int],
    ) -> dict[int, list[UserSkillTag]]:
        """Live tags of this group assigned to each user, keyed by user id."""
        if not user_ids:
            return {}
        result = await self.db.execute(
            select(user_skill_tag_assignments.c.user_id, UserSkillTag)
            .join(
                UserSkillTag,
                UserSkillTag.id == user_skill_tag_assignments.c.user_skill_tag_id,
            )
            .where(UserSkillTag.group_id == group_id)
            .where(UserSkillTag.deleted_at.is_(None))
            .where(user_skill_tag_assignments.c.user_id.in_(user_ids))
            .order_by(UserSkillTag.name, UserSkillTag.id)
        )
        by_user: dict[int, list[UserSkillTag]] = defaultdict(list)
        for user_id, tag in result.all():
            by_user[user_id].append(tag)
        return dict(by_user)

    async def set_user_skill_tags(
        self, group_id: GroupId, target_user_id: UserId, tag_ids: list[int],
    ) -> list[UserSkillTag]:
        """Replace the member's skill tags for this group with exactly `tag_ids`."""
        role = await SqlMembershipStore(self.db).get_role(target_user_id, group_id)
        if role is None:
            raise ValidationFailedError(
                "User is not a member of this group",
                field="user_id",
                details={"group_id": group_id, "user_id": target_user_id},
            )

        requested = dedupe_tag_ids(tag_ids)
        owned = await self.db.execute(
            select(UserSkillTag.id)
            .where(UserSkillTag.group_id == group_id)
            .where(UserSkillTag.deleted_at.is_(None))
        )
        owned_ids = list(owned.scalars().all())
        check_tag_ownership(group_id, requested, owned_ids)

        await self.db.execute(
            delete(user_skill_tag_assignments)
            .where(user_skill_tag_assignments.c.user_id == target_user_id)
            .where(user_skill_tag_assignments.c.user_skill_tag_id.in_(owned_ids))
        )
        if requested:
            await self.db.execute(
                insert(user_skill_tag_assignments),
                [
                    {"user_id": target_user_id, "user_skill_tag_id": tag_id}
                    for tag_id in requested
                ],
            )
        await self.db.commit()

        logger.info(
            f"Skill tags replaced: {len(requested)} assigned",
            extra={"user_id": target_user_id, "group_id": group_id},
        )
        assigned = await self.tags_for_users(group_id, [target_user_id])
        return assigned.get(target_user_id, [])
