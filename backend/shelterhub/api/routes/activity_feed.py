"""Group Activity Feed — merged, filterable, paginated comments and updates.

Invariants:
    - MEMBER access (403) is checked before the feed is built; an unknown group is also 403
    - Query values are lenient: bad limit/offset/type/date text falls back to defaults;
      only an offset beyond the configured ceiling is rejected
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.api.dependencies import authorize_group, get_principal
from shelterhub.core.domain_types import GroupId, Principal
from shelterhub.core.feed_merge import parse_feed_type, parse_iso_datetime, parse_tag_filter
from shelterhub.infrastructure.database import get_db
from shelterhub.schemas.feed import FeedResponse
from shelterhub.services.activity_feed import ActivityAggregator, FeedFilters

router = APIRouter(prefix="/api/v1/groups", tags=["activity"])


def _parse_animal_id(raw: str | None) -> int | None:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@router.get("/{group_id}/activity", response_model=FeedResponse)
async def get_group_activity(
    group_id: int,
    feed_type: str | None = Query(None, alias="type"),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    animal: str | None = Query(None),
    tags: str | None = Query(None),
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    await authorize_group(db, principal, group_id)
    filters = FeedFilters(
        animal_id=_parse_animal_id(animal),
        tags=parse_tag_filter(tags),
        since=parse_iso_datetime(date_from),
        until=parse_iso_datetime(date_to),
    )
    page = await ActivityAggregator(db).get_feed(
        GroupId(group_id), parse_feed_type(feed_type), limit, offset, filters,
    )
    return FeedResponse.from_page(page)
