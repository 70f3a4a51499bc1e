"""UserGroup ORM — membership join row; its existence is the sole authority for "is member of".

Invariants:
    - Composite primary key (user_id, group_id): no duplicate pairs
    - role is a MembershipRole value; group admin is a property of the membership,
      not a global role
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shelterhub.core.domain_types import MembershipRole
from shelterhub.db.base import Base


class UserGroup(Base):
    __tablename__ = "user_groups"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
    )
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MembershipRole.MEMBER.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", back_populates="memberships")
    group: Mapped["Group"] = relationship("Group", back_populates="memberships")

    @property
    def membership_role(self) -> MembershipRole:
        return MembershipRole(self.role)
