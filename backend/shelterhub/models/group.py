"""Group ORM — a shelter site or program whose members share custody of its animals.

Invariants:
    - name is unique
    - Owns animals, updates, comment tags and skill tags (all scoped by group_id)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shelterhub.db.base import Base, SoftDeleteMixin


class Group(SoftDeleteMixin, Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    memberships: Mapped[list["UserGroup"]] = relationship(
        "UserGroup", back_populates="group", cascade="all, delete-orphan",
    )
    animals: Mapped[list["Animal"]] = relationship(
        "Animal", back_populates="group",
    )
