"""Health — unauthenticated liveness and readiness for the shelter API.

Invariants:
    - /health/ answers 200 whenever the process can serve a request
    - /health/ready is 503 while the store is unreachable; queued announcement
      email never affects readiness, it is only reported
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from shelterhub.api.dependencies import get_outbox
from shelterhub.infrastructure import database
from shelterhub.services.announcement_outbox import AnnouncementOutbox

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "shelterhub-api"}


@router.get("/ready")
async def readiness_check(outbox: AnnouncementOutbox = Depends(get_outbox)):
    manager = database.db_manager
    store_ok = await manager.health_check() if manager else False
    if not store_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "store_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"store": "reachable"},
        "pending_email_deliveries": outbox.pending_count,
    }
