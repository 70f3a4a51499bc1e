"""Animals & Comments — custody records of a group and member notes on them.

Invariants:
    - Reads and creates require MEMBER on the owning group; deleting an animal
      requires GROUP_ADMIN
    - Comment routes resolve comment → animal → group before authorizing; a miss
      is a 403 for non-admins, so ids of other groups stay hidden
    - A comment may be deleted by its author or by a group admin
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.api.dependencies import authorize_group, get_principal, resolve_or_deny
from shelterhub.core.domain_types import AccessLevel, AnimalStatus, GroupId, Principal
from shelterhub.core.errors import ResourceNotFoundError
from shelterhub.infrastructure.database import get_db
from shelterhub.schemas.animals import (
    AnimalCreate, AnimalResponse, CommentCreate, CommentResponse, CommentTagResponse,
)
from shelterhub.services.animals import AnimalService
from shelterhub.services.lookups import get_animal_or_404, get_comment_or_404

router = APIRouter(prefix="/api/v1", tags=["animals"])


@router.get("/groups/{group_id}/animals", response_model=list[AnimalResponse])
async def list_animals(
    group_id: int,
    animal_status: AnimalStatus | None = Query(None, alias="status"),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id)
    return await AnimalService(db).list_animals(GroupId(group_id), animal_status)


@router.post(
    "/groups/{group_id}/animals",
    response_model=AnimalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_animal(
    group_id: int,
    body: AnimalCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id)
    return await AnimalService(db).create_animal(
        GroupId(group_id), body.name, body.status, body.image_url,
    )


@router.delete("/groups/{group_id}/animals/{animal_id}")
async def delete_animal(
    group_id: int,
    animal_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id, AccessLevel.GROUP_ADMIN)
    animal = await get_animal_or_404(db, animal_id)
    if animal.group_id != group_id:
        raise ResourceNotFoundError("Animal", animal_id)
    await AnimalService(db).delete_animal(animal)
    return {"message": "Animal deleted"}


@router.get("/groups/{group_id}/comment-tags", response_model=list[CommentTagResponse])
async def list_comment_tags(
    group_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id)
    return await AnimalService(db).list_comment_tags(GroupId(group_id))


@router.post(
    "/animals/{animal_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    animal_id: int,
    body: CommentCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    animal = await resolve_or_deny(principal, get_animal_or_404(db, animal_id))
    await authorize_group(db, principal, animal.group_id)
    return await AnimalService(db).add_comment(
        animal, principal.user_id, body.content, body.image_url, body.tag_ids,
    )


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    comment, group_id = await resolve_or_deny(principal, get_comment_or_404(db, comment_id))
    required = (
        AccessLevel.MEMBER if comment.user_id == principal.user_id
        else AccessLevel.GROUP_ADMIN
    )
    await authorize_group(db, principal, group_id, required)
    await AnimalService(db).delete_comment(comment)
    return {"message": "Comment deleted"}
