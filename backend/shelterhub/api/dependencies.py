"""API Dependencies — principal extraction and shared service wiring for routes.

Invariants:
    - Every non-health route depends on get_principal; a missing or invalid bearer
      token is a 401 before any store access
    - is_site_admin comes from the token only, never from membership rows
    - One AnnouncementOutbox per process, drained by the app lifespan
    - Non-admins get the same 403 for a missing group or row as for a denied one;
      only site admins, or callers who already passed the group check, see a 404
"""

from functools import lru_cache
from typing import Awaitable, TypeVar

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.config import get_settings
from shelterhub.core.domain_types import AccessLevel, GroupId, Principal
from shelterhub.core.errors import (
    AccessDeniedError, AuthenticationError, ErrorContext, ResourceNotFoundError,
)
from shelterhub.infrastructure.email_client import SMTPEmailClient
from shelterhub.infrastructure.security import decode_access_token
from shelterhub.models.group import Group
from shelterhub.services.access_evaluator import AccessEvaluator
from shelterhub.services.announcement_outbox import AnnouncementOutbox
from shelterhub.services.lookups import get_group_or_404
from shelterhub.services.membership_store import SqlMembershipStore

T = TypeVar("T")

_bearer = HTTPBearer(auto_error=False)


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return decode_access_token(credentials.credentials)


@lru_cache
def get_outbox() -> AnnouncementOutbox:
    settings = get_settings()
    return AnnouncementOutbox(
        SMTPEmailClient(settings), max_concurrency=settings.email_max_concurrency,
    )


async def authorize_group(
    db: AsyncSession,
    principal: Principal,
    group_id: int,
    required: AccessLevel = AccessLevel.MEMBER,
) -> Group:
    """403 unless the principal holds `required`; the group lookup runs after.

    The evaluator already denies unknown groups for non-admins, so the 404 here is
    only reachable by site admins.
    """
    evaluator = AccessEvaluator(SqlMembershipStore(db))
    await evaluator.require(principal, GroupId(group_id), required)
    return await get_group_or_404(db, group_id)


async def resolve_or_deny(principal: Principal, lookup: Awaitable[T]) -> T:
    """Await a row lookup made before the owning group is known.

    A miss is a 404 for site admins and an ordinary denial for everyone else.
    """
    try:
        return await lookup
    except ResourceNotFoundError:
        if principal.is_site_admin:
            raise
        raise AccessDeniedError(
            "Access denied", ErrorContext(user_id=principal.user_id),
        ) from None
