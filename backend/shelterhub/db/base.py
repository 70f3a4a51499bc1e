"""SQLAlchemy Declarative Base — shared base class and soft-delete column for ORM models.

Invariants:
    - All models inherit from Base
    - Soft-deletable models mix in SoftDeleteMixin; deleted_at IS NULL means "live"

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Soft deletion is an explicit predicate (not a global query filter): maintenance
      cleanup must be able to target deleted rows
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ShelterHub ORM models."""
    pass


class SoftDeleteMixin:
    """Adds a nullable deletion marker."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = datetime.now(timezone.utc)
