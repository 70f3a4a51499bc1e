"""Boundary Protocols — contracts between core rules and the IO shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - MembershipStore may raise; the access evaluator owns the fail-closed mapping
"""

from typing import Protocol

from shelterhub.core.domain_types import GroupId, MembershipRole, UserId


class MembershipStore(Protocol):
    """Read-only view of User↔Group relations."""
    async def get_role(
        self, user_id: UserId, group_id: GroupId,
    ) -> MembershipRole | None: ...
    async def group_exists(self, group_id: GroupId) -> bool: ...


class EmailSender(Protocol):
    """Outbound announcement mail."""
    def is_configured(self) -> bool: ...
    def send_announcement_email(self, address: str, title: str, body: str) -> None: ...
