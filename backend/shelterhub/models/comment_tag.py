"""CommentTag ORM — group-scoped label attached to animal comments.

Invariants:
    - (group_id, name) is unique
    - is_system marks operational alerts ("Needs Attention", "Medical", ...) and is the
      only signal the dashboard uses to flag animals
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shelterhub.db.base import Base, SoftDeleteMixin


class CommentTag(SoftDeleteMixin, Base):
    __tablename__ = "comment_tags"
    __table_args__ = (
        UniqueConstraint("group_id", "name", name="uq_comment_tag_group_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id"), nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default="#6b7280")
    is_system: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
