"""Announcement Outbox — post-commit email fan-out on a bounded pool of detached tasks.

Invariants:
    - dispatch() is called only after the announcement/update row is committed
    - Recipient addresses are resolved by the caller after commit; the outbox never
      touches the database
    - At most `max_concurrency` sends are in flight at once
    - Deliveries run in tasks detached from the request: cancelling the request does
      not cancel them
    - Per-recipient failures are collected into the DeliveryReport and logged; they
      never reach the request and never roll anything back
    - drain() waits for every outstanding delivery (called from the app lifespan)

Design Decisions:
    - smtplib is blocking, so each send runs in asyncio.to_thread
    - An unconfigured sender short-circuits to an empty report instead of N failures
"""

import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelterhub.core.repository_protocols import EmailSender
from shelterhub.models.user import User
from shelterhub.models.user_group import UserGroup

logger = logging.getLogger(__name__)


@dataclass
class DeliveryReport:
    recipient_count: int = 0
    sent: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def sent_count(self) -> int:
        return len(self.sent)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


class AnnouncementOutbox:
    """Fans one message out to many recipients without blocking the request."""

    def __init__(self, sender: EmailSender, max_concurrency: int = 5):
        self.sender = sender
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def dispatch(
        self, recipients: list[str], title: str, body: str,
    ) -> asyncio.Task | None:
        """Schedule delivery and return the task producing the DeliveryReport."""
        if not recipients:
            return None
        if not self.sender.is_configured():
            logger.warning(
                "Email service not configured, skipping announcement dispatch",
                extra={"recipient_count": len(recipients)},
            )
            return None
        task = asyncio.create_task(self._deliver(list(recipients), title, body))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send_one(
        self, address: str, title: str, body: str, report: DeliveryReport,
    ) -> None:
        async with self._semaphore:
            try:
                await asyncio.to_thread(
                    self.sender.send_announcement_email, address, title, body,
                )
            except Exception as e:
                report.failed[address] = str(e)
                logger.warning(f"Announcement email to {address} failed: {e}")
                return
        report.sent.append(address)

    async def _deliver(self, recipients: list[str], title: str, body: str) -> DeliveryReport:
        report = DeliveryReport(recipient_count=len(recipients))
        await asyncio.gather(
            *(self._send_one(address, title, body, report) for address in recipients)
        )
        logger.info(
            "Announcement dispatch finished",
            extra={
                "recipient_count": report.recipient_count,
                "sent_count": report.sent_count,
                "failed_count": report.failed_count,
            },
        )
        return report

    async def drain(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


# ─── Recipient Resolution ─────────────────────────────────────────

async def opted_in_addresses(db: AsyncSession) -> list[str]:
    """Every live user who accepts announcement email."""
    result = await db.execute(
        select(User.email)
        .where(User.deleted_at.is_(None))
        .where(User.email_notifications_enabled.is_(True))
        .order_by(User.id)
    )
    return [email for email in result.scalars().all() if email]


async def group_opted_in_addresses(db: AsyncSession, group_id: int) -> list[str]:
    """Live members of one group who accept announcement email."""
    result = await db.execute(
        select(User.email)
        .join(UserGroup, UserGroup.user_id == User.id)
        .where(UserGroup.group_id == group_id)
        .where(User.deleted_at.is_(None))
        .where(User.email_notifications_enabled.is_(True))
        .order_by(User.id)
    )
    return [email for email in result.scalars().all() if email]
