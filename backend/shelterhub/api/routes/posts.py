"""Updates & Announcements — group posts and site-wide posts, with optional email.

Invariants:
    - Group updates: MEMBER to post; author or GROUP_ADMIN to delete
    - Announcements: any authenticated user reads; site admin posts and deletes
    - Email is dispatched through the outbox only after the post is committed
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.api.dependencies import (
    authorize_group, get_outbox, get_principal, resolve_or_deny,
)
from shelterhub.core.domain_types import AccessLevel, GroupId, Principal
from shelterhub.core.errors import ResourceNotFoundError
from shelterhub.infrastructure.database import get_db
from shelterhub.schemas.posts import (
    AnnouncementCreate, AnnouncementResponse, UpdateCreate, UpdateResponse,
)
from shelterhub.services.access_evaluator import require_site_admin
from shelterhub.services.announcement_outbox import AnnouncementOutbox
from shelterhub.services.lookups import get_update_or_404
from shelterhub.services.posts import PostService

router = APIRouter(prefix="/api/v1", tags=["posts"])


@router.post(
    "/groups/{group_id}/updates",
    response_model=UpdateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_update(
    group_id: int,
    body: UpdateCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
    outbox: AnnouncementOutbox = Depends(get_outbox),
):
    await authorize_group(db, principal, group_id)
    return await PostService(db, outbox).create_update(
        GroupId(group_id), principal.user_id, body.title, body.content,
        body.image_url, body.send_email,
    )


@router.delete("/updates/{update_id}")
async def delete_update(
    update_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
    outbox: AnnouncementOutbox = Depends(get_outbox),
):
    update = await resolve_or_deny(principal, get_update_or_404(db, update_id))
    required = (
        AccessLevel.MEMBER if update.user_id == principal.user_id
        else AccessLevel.GROUP_ADMIN
    )
    await authorize_group(db, principal, update.group_id, required)
    await PostService(db, outbox).delete_update(update)
    return {"message": "Update deleted"}


@router.get("/announcements", response_model=list[AnnouncementResponse])
async def list_announcements(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
    outbox: AnnouncementOutbox = Depends(get_outbox),
):
    return await PostService(db, outbox).recent_announcements()


@router.post(
    "/announcements",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_announcement(
    body: AnnouncementCreate,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
    outbox: AnnouncementOutbox = Depends(get_outbox),
):
    require_site_admin(principal)
    return await PostService(db, outbox).create_announcement(
        principal.user_id, body.title, body.content, body.send_email,
    )


@router.delete("/announcements/{announcement_id}")
async def delete_announcement(
    announcement_id: int,
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
    outbox: AnnouncementOutbox = Depends(get_outbox),
):
    require_site_admin(principal)
    service = PostService(db, outbox)
    announcement = await service.get_announcement(announcement_id)
    if announcement is None:
        raise ResourceNotFoundError("Announcement", announcement_id)
    await service.delete_announcement(announcement)
    return {"message": "Announcement deleted"}
