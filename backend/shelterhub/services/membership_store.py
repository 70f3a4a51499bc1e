"""SQL Membership Store — reads UserGroup rows for the access evaluator.

Invariants:
    - Read-only; never caches (membership may change between requests)
    - Soft-deleted groups and users count as "no membership"
    - Store errors propagate; fail-closed mapping belongs to the evaluator
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.core.domain_types import GroupId, MembershipRole, UserId
from shelterhub.models.group import Group
from shelterhub.models.user import User
from shelterhub.models.user_group import UserGroup


class SqlMembershipStore:
    """MembershipStore over the user_groups table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_role(
        self, user_id: UserId, group_id: GroupId,
    ) -> MembershipRole | None:
        result = await self.db.execute(
            select(UserGroup.role)
            .join(Group, Group.id == UserGroup.group_id)
            .join(User, User.id == UserGroup.user_id)
            .where(UserGroup.user_id == user_id)
            .where(UserGroup.group_id == group_id)
            .where(Group.deleted_at.is_(None))
            .where(User.deleted_at.is_(None))
        )
        role = result.scalar_one_or_none()
        return MembershipRole(role) if role is not None else None

    async def group_exists(self, group_id: GroupId) -> bool:
        result = await self.db.execute(
            select(Group.id)
            .where(Group.id == group_id)
            .where(Group.deleted_at.is_(None))
        )
        return result.scalar_one_or_none() is not None
