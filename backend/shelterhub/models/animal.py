"""Animal ORM — belongs to exactly one group; status tracks custody.

Invariants:
    - group_id is non-nullable
    - status is an AnimalStatus value
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shelterhub.core.domain_types import AnimalStatus
from shelterhub.db.base import Base, SoftDeleteMixin


class Animal(SoftDeleteMixin, Base):
    __tablename__ = "animals"
    __table_args__ = (
        Index("idx_animal_group_status", "group_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id"), nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=AnimalStatus.AVAILABLE.value,
    )
    image_url: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    group: Mapped["Group"] = relationship("Group", back_populates="animals")
    comments: Mapped[list["AnimalComment"]] = relationship(
        "AnimalComment", back_populates="animal",
    )
