"""Groups & Membership — group listing/creation and member management.

Invariants:
    - Listing: site admins see every live group, others only their own
    - Creating groups is site-admin only
    - Member changes require GROUP_ADMIN on the group
    - Removing a member revokes access on their next request (nothing cached)
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.api.dependencies import authorize_group, get_principal
from shelterhub.core.domain_types import AccessLevel, GroupId, Principal, UserId
from shelterhub.infrastructure.database import get_db
from shelterhub.schemas.groups import (
    GroupCreate, GroupResponse, MemberResponse, MemberSkillTag,
    MembershipChangeResponse, MembershipInfoResponse,
)
from shelterhub.services.access_evaluator import require_site_admin
from shelterhub.services.membership import MembershipService
from shelterhub.services.skill_tags import SkillTagReconciler

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/groups", tags=["groups"])


@router.get("", response_model=list[GroupResponse])
async def list_groups(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipService(db).list_groups(principal)


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    body: GroupCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    require_site_admin(principal)
    return await MembershipService(db).create_group(body.name, body.description)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    return await authorize_group(db, principal, group_id)


@router.get("/{group_id}/membership", response_model=MembershipInfoResponse)
async def get_membership(
    group_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """The caller's own standing in the group."""
    await authorize_group(db, principal, group_id)
    return await MembershipService(db).membership_info(principal, GroupId(group_id))


@router.get("/{group_id}/members", response_model=list[MemberResponse])
async def list_members(
    group_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id)
    members = await MembershipService(db).list_members(GroupId(group_id))
    tags = await SkillTagReconciler(db).tags_for_users(
        GroupId(group_id), [user.id for user, _ in members],
    )
    return [
        MemberResponse(
            user_id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            role=role,
            skill_tags=[MemberSkillTag.model_validate(t) for t in tags.get(user.id, [])],
        )
        for user, role in members
    ]


@router.post("/{group_id}/members/{user_id}", response_model=MembershipChangeResponse)
async def add_member(
    group_id: int,
    user_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    return await MembershipService(db).add_member(GroupId(group_id), UserId(user_id))


@router.delete("/{group_id}/members/{user_id}")
async def remove_member(
    group_id: int,
    user_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    await MembershipService(db).remove_member(GroupId(group_id), UserId(user_id))
    return {"message": "User removed from group"}


@router.post("/{group_id}/members/{user_id}/admin", response_model=MembershipChangeResponse)
async def promote_member(
    group_id: int,
    user_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    return await MembershipService(db).promote(GroupId(group_id), UserId(user_id))


@router.delete("/{group_id}/members/{user_id}/admin", response_model=MembershipChangeResponse)
async def demote_member(
    group_id: int,
    user_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    return await MembershipService(db).demote(GroupId(group_id), UserId(user_id))
