"""Statistics — comment-tag usage rollups for any authenticated user.

Invariants:
    - With group_id: MEMBER on that group, same 403 for unknown and forbidden groups
    - Without group_id: site admins see every group's tags, others only their own groups'
    - A non-numeric group_id is a 400
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.api.dependencies import authorize_group, get_principal
from shelterhub.core.domain_types import Principal
from shelterhub.core.errors import ValidationFailedError
from shelterhub.infrastructure.database import get_db
from shelterhub.schemas.dashboard import CommentTagStatisticsPageResponse
from shelterhub.services.membership import MembershipService
from shelterhub.services.reporting import ReportingAggregator

router = APIRouter(prefix="/api/v1/statistics", tags=["statistics"])


def _parse_group_id(raw: str) -> int:
    try:
        group_id = int(raw.strip())
    except ValueError:
        group_id = -1
    if group_id <= 0:
        raise ValidationFailedError(
            "Invalid group_id parameter", field="group_id", details={"received": raw},
        )
    return group_id


@router.get("/comment-tags", response_model=CommentTagStatisticsPageResponse)
async def get_comment_tag_statistics(
    group_id: str | None = Query(None),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    if group_id:
        scoped = _parse_group_id(group_id)
        await authorize_group(db, principal, scoped)
        group_ids = [scoped]
    elif principal.is_site_admin:
        group_ids = None
    else:
        groups = await MembershipService(db).list_groups(principal)
        group_ids = [group.id for group in groups]
    page = await ReportingAggregator(db).comment_tag_statistics(limit, offset, group_ids)
    return CommentTagStatisticsPageResponse.model_validate(page)
