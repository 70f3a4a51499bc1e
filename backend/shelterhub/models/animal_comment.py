"""AnimalComment ORM — a member's note on an animal, optionally tagged.

Invariants:
    - Belongs to exactly one animal and one author
    - Tags come from the animal's group (enforced at write time by the comment route)
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shelterhub.db.base import Base, SoftDeleteMixin

animal_comment_tags = Table(
    "animal_comment_tags",
    Base.metadata,
    Column(
        "animal_comment_id", Integer,
        ForeignKey("animal_comments.id", ondelete="CASCADE"), primary_key=True,
    ),
    Column(
        "comment_tag_id", Integer,
        ForeignKey("comment_tags.id", ondelete="CASCADE"), primary_key=True,
    ),
)


class AnimalComment(SoftDeleteMixin, Base):
    __tablename__ = "animal_comments"
    __table_args__ = (
        Index("idx_comment_animal_created", "animal_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    animal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("animals.id"), nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    animal: Mapped["Animal"] = relationship("Animal", back_populates="comments")
    author: Mapped["User"] = relationship("User", lazy="selectin")
    tags: Mapped[list["CommentTag"]] = relationship(
        "CommentTag", secondary=animal_comment_tags, lazy="selectin",
    )
