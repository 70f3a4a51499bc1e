"""Group Membership — create groups and manage who belongs to them.

Invariants:
    - UserGroup existence is the only membership signal; changes take effect on the
      caller's next request (nothing is cached)
    - Callers authorize first: group admin (or site admin) for every write here
    - add_member is idempotent; promote/demote reject no-op transitions
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.core.domain_types import GroupId, MembershipRole, Principal, UserId
from shelterhub.core.errors import ValidationFailedError
from shelterhub.models.group import Group
from shelterhub.models.user import User
from shelterhub.models.user_group import UserGroup
from shelterhub.services.lookups import get_group_or_404, get_user_or_404

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MembershipInfo:
    group_id: int
    is_member: bool
    is_group_admin: bool
    is_site_admin: bool


class MembershipService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_groups(self, principal: Principal) -> list[Group]:
        """All live groups for a site admin; the caller's own groups otherwise."""
        query = select(Group).where(Group.deleted_at.is_(None))
        if not principal.is_site_admin:
            query = query.join(UserGroup, UserGroup.group_id == Group.id).where(
                UserGroup.user_id == principal.user_id,
            )
        result = await self.db.execute(query.order_by(Group.name, Group.id))
        return list(result.scalars().all())

    async def create_group(self, name: str, description: str = "") -> Group:
        existing = await self.db.execute(select(Group.id).where(Group.name == name))
        if existing.scalar_one_or_none() is not None:
            raise ValidationFailedError(
                "A group with this name already exists", field="name",
            )
        group = Group(name=name, description=description)
        self.db.add(group)
        await self.db.commit()
        await self.db.refresh(group)
        logger.info(f"Group created: {group.name}", extra={"group_id": group.id})
        return group

    async def membership_info(self, principal: Principal, group_id: GroupId) -> MembershipInfo:
        membership = await self._membership(principal.user_id, group_id)
        return MembershipInfo(
            group_id=group_id,
            is_member=membership is not None,
            is_group_admin=(
                membership is not None
                and membership.membership_role is MembershipRole.ADMIN
            ),
            is_site_admin=principal.is_site_admin,
        )

    async def list_members(self, group_id: GroupId) -> list[tuple[User, MembershipRole]]:
        result = await self.db.execute(
            select(User, UserGroup.role)
            .join(UserGroup, UserGroup.user_id == User.id)
            .where(UserGroup.group_id == group_id)
            .where(User.deleted_at.is_(None))
            .order_by(User.username, User.id)
        )
        return [(user, MembershipRole(role)) for user, role in result.all()]

    async def _membership(self, user_id: int, group_id: int) -> UserGroup | None:
        result = await self.db.execute(
            select(UserGroup)
            .where(UserGroup.user_id == user_id)
            .where(UserGroup.group_id == group_id)
        )
        return result.scalar_one_or_none()

    async def _require_membership(self, user_id: int, group_id: int) -> UserGroup:
        membership = await self._membership(user_id, group_id)
        if membership is None:
            raise ValidationFailedError(
                "User is not a member of this group",
                field="user_id",
                details={"group_id": group_id, "user_id": user_id},
            )
        return membership

    async def add_member(self, group_id: GroupId, user_id: UserId) -> UserGroup:
        await get_group_or_404(self.db, group_id)
        await get_user_or_404(self.db, user_id)
        membership = await self._membership(user_id, group_id)
        if membership is not None:
            return membership
        membership = UserGroup(
            user_id=user_id, group_id=group_id, role=MembershipRole.MEMBER.value,
        )
        self.db.add(membership)
        await self.db.commit()
        logger.info("Member added", extra={"user_id": user_id, "group_id": group_id})
        return membership

    async def remove_member(self, group_id: GroupId, user_id: UserId) -> None:
        await get_user_or_404(self.db, user_id)
        membership = await self._require_membership(user_id, group_id)
        await self.db.delete(membership)
        await self.db.commit()
        logger.info("Member removed", extra={"user_id": user_id, "group_id": group_id})

    async def promote(self, group_id: GroupId, user_id: UserId) -> UserGroup:
        await get_user_or_404(self.db, user_id)
        membership = await self._require_membership(user_id, group_id)
        if membership.membership_role is MembershipRole.ADMIN:
            raise ValidationFailedError("User is already a group admin", field="user_id")
        membership.role = MembershipRole.ADMIN.value
        await self.db.commit()
        logger.info("Member promoted", extra={"user_id": user_id, "group_id": group_id})
        return membership

    async def demote(self, group_id: GroupId, user_id: UserId) -> UserGroup:
        await get_user_or_404(self.db, user_id)
        membership = await self._require_membership(user_id, group_id)
        if membership.membership_role is not MembershipRole.ADMIN:
            raise ValidationFailedError("User is not a group admin", field="user_id")
        membership.role = MembershipRole.MEMBER.value
        await self.db.commit()
        logger.info("Member demoted", extra={"user_id": user_id, "group_id": group_id})
        return membership
