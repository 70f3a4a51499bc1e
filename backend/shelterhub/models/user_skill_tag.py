"""UserSkillTag ORM — a group-defined skill label assigned to members of that group.

Invariants:
    - Scoped to exactly one group
    - Assignments live in user_skill_tag_assignments; a member's set for one group is
      replaced wholesale, never patched
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from shelterhub.db.base import Base, SoftDeleteMixin

user_skill_tag_assignments = Table(
    "user_skill_tag_assignments",
    Base.metadata,
    Column(
        "user_id", Integer,
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "user_skill_tag_id", Integer,
        ForeignKey("user_skill_tags.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class UserSkillTag(SoftDeleteMixin, Base):
    __tablename__ = "user_skill_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id"), nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
