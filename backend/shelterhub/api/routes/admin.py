"""Admin — site-operator dashboard, group and user rollups, and maintenance.

Invariants:
    - Every route here is site-admin only; the check precedes any store read
    - Maintenance only purges whitelisted tables, only rows already soft-deleted
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.api.dependencies import get_principal
from shelterhub.core.domain_types import Principal
from shelterhub.core.errors import ValidationFailedError
from shelterhub.infrastructure.database import get_db
from shelterhub.schemas.dashboard import (
    DashboardResponse, GroupStatisticsPageResponse, UserStatisticsPageResponse,
)
from shelterhub.services.access_evaluator import require_site_admin
from shelterhub.services.maintenance import purge_soft_deleted, resolve_retention_days
from shelterhub.services.reporting import ReportingAggregator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    require_site_admin(principal)
    return await ReportingAggregator(db).get_dashboard_stats()


@router.get("/statistics/groups", response_model=GroupStatisticsPageResponse)
async def get_group_statistics(
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    require_site_admin(principal)
    page = await ReportingAggregator(db).group_statistics(limit, offset)
    return GroupStatisticsPageResponse.model_validate(page)


@router.get("/statistics/users", response_model=UserStatisticsPageResponse)
async def get_user_statistics(
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    require_site_admin(principal)
    page = await ReportingAggregator(db).user_statistics(limit, offset)
    return UserStatisticsPageResponse.model_validate(page)


@router.post("/maintenance/soft-deleted")
async def cleanup_soft_deleted(
    table: str | None = Query(None),
    days: str | None = Query(None),
    principal: Principal = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    require_site_admin(principal)
    if not table:
        raise ValidationFailedError("table parameter is required", field="table")
    retention = resolve_retention_days(days)
    logger.info(
        "Admin triggered soft-deleted records cleanup",
        extra={"user_id": principal.user_id, "table": table, "days": retention},
    )
    deleted = await purge_soft_deleted(db, table, retention)
    return {
        "message": "Cleanup completed successfully",
        "table": table,
        "days": retention,
        "deleted_count": deleted,
    }
