"""Access Evaluator — per-request authorization of a principal against a group.

Invariants:
    - authorize() is a pure predicate over current store state: no caching, no writes
    - Site admins pass without a store lookup
    - Unknown or soft-deleted groups are "no access"
    - ANY exception while resolving membership means denial (fail closed)
    - require() raises AccessDeniedError; it never raises NotFound, so a missing group
      and a forbidden one look the same to non-admins

Design Decisions:
    - Decision logic lives in core/access_rules.py; this class only does IO and the
      error-to-denial mapping
"""

import logging

from shelterhub.core.access_rules import decide_access, requires_membership_lookup
from shelterhub.core.domain_types import AccessLevel, GroupId, Principal
from shelterhub.core.errors import AccessDeniedError, ErrorContext
from shelterhub.core.repository_protocols import MembershipStore

logger = logging.getLogger(__name__)


class AccessEvaluator:
    """Decides whether a principal may act on a group's resources."""

    def __init__(self, store: MembershipStore):
        self.store = store

    async def authorize(
        self, principal: Principal, group_id: GroupId, required: AccessLevel,
    ) -> bool:
        if not requires_membership_lookup(principal):
            return decide_access(principal, None, required)
        try:
            if not await self.store.group_exists(group_id):
                return False
            role = await self.store.get_role(principal.user_id, group_id)
        except Exception as e:
            logger.error(
                f"Membership lookup failed, denying access: {e}",
                extra={
                    "user_id": principal.user_id, "group_id": group_id,
                    "required_level": required.value,
                },
            )
            return False
        return decide_access(principal, role, required)

    async def require(
        self,
        principal: Principal,
        group_id: GroupId,
        required: AccessLevel = AccessLevel.MEMBER,
        message: str = "Access denied",
    ) -> None:
        if await self.authorize(principal, group_id, required):
            return
        logger.info(
            "Access denied",
            extra={
                "user_id": principal.user_id, "group_id": group_id,
                "required_level": required.value,
            },
        )
        raise AccessDeniedError(
            message,
            ErrorContext(user_id=principal.user_id, group_id=group_id),
        )


def require_site_admin(principal: Principal) -> None:
    """Operator-only surfaces (dashboard, maintenance, global announcements)."""
    if not principal.is_site_admin:
        raise AccessDeniedError(
            "Site admin access required",
            ErrorContext(user_id=principal.user_id),
        )
