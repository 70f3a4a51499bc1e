"""Skill Tags — group-defined member skills and their assignment.

Invariants:
    - Listing requires MEMBER; every write requires GROUP_ADMIN
    - PUT .../skill-tags replaces the member's set for this group all-or-nothing
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.api.dependencies import authorize_group, get_principal
from shelterhub.core.domain_types import AccessLevel, GroupId, Principal, UserId
from shelterhub.infrastructure.database import get_db
from shelterhub.schemas.skill_tags import (
    SkillTagAssignment, SkillTagAssignmentResponse, SkillTagCreate, SkillTagResponse,
)
from shelterhub.services.skill_tags import SkillTagReconciler

router = APIRouter(prefix="/api/v1/groups", tags=["skill-tags"])


@router.get("/{group_id}/skill-tags", response_model=list[SkillTagResponse])
async def list_skill_tags(
    group_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id)
    return await SkillTagReconciler(db).list_tags(GroupId(group_id))


@router.post(
    "/{group_id}/skill-tags",
    response_model=SkillTagResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_skill_tag(
    group_id: int,
    body: SkillTagCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    return await SkillTagReconciler(db).create_tag(GroupId(group_id), body.name, body.color)


@router.put("/{group_id}/skill-tags/{tag_id}", response_model=SkillTagResponse)
async def update_skill_tag(
    group_id: int,
    tag_id: int,
    body: SkillTagCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    return await SkillTagReconciler(db).update_tag(
        GroupId(group_id), tag_id, body.name, body.color,
    )


@router.delete("/{group_id}/skill-tags/{tag_id}")
async def delete_skill_tag(
    group_id: int,
    tag_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    await SkillTagReconciler(db).delete_tag(GroupId(group_id), tag_id)
    return {"message": "Skill tag deleted"}


@router.put(
    "/{group_id}/members/{user_id}/skill-tags",
    response_model=SkillTagAssignmentResponse,
)
async def assign_skill_tags(
    group_id: int,
    user_id: int,
    body: SkillTagAssignment,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    tags = await SkillTagReconciler(db).set_user_skill_tags(
        GroupId(group_id), UserId(user_id), body.tag_ids,
    )
    return SkillTagAssignmentResponse(
        user_id=user_id,
        group_id=group_id,
        tags=[SkillTagResponse.model_validate(tag) for tag in tags],
    )
