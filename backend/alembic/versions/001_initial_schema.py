"""Initial schema — users, groups, memberships, animals, comments, posts, tags.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("email_notifications_enabled", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
    )
    op.create_index("ix_users_created_at", "users", ["created_at"])
    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])

    op.create_table(
        "groups",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_groups_deleted_at", "groups", ["deleted_at"])

    op.create_table(
        "user_groups",
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("group_id", sa.Integer, sa.ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_groups_group_id", "user_groups", ["group_id"])

    op.create_table(
        "animals",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("group_id", sa.Integer, sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="available"),
        sa.Column("image_url", sa.String(500), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("idx_animal_group_status", "animals", ["group_id", "status"])
    op.create_index("ix_animals_deleted_at", "animals", ["deleted_at"])

    op.create_table(
        "comment_tags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("group_id", sa.Integer, sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("color", sa.String(20), nullable=False, server_default="#6b7280"),
        sa.Column("is_system", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("group_id", "name", name="uq_comment_tag_group_name"),
    )
    op.create_index("ix_comment_tags_group_id", "comment_tags", ["group_id"])
    op.create_index("ix_comment_tags_deleted_at", "comment_tags", ["deleted_at"])

    op.create_table(
        "animal_comments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("animal_id", sa.Integer, sa.ForeignKey("animals.id"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("idx_comment_animal_created", "animal_comments", ["animal_id", "created_at"])
    op.create_index("ix_animal_comments_user_id", "animal_comments", ["user_id"])
    op.create_index("ix_animal_comments_deleted_at", "animal_comments", ["deleted_at"])

    op.create_table(
        "animal_comment_tags",
        sa.Column(
            "animal_comment_id", sa.Integer,
            sa.ForeignKey("animal_comments.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "comment_tag_id", sa.Integer,
            sa.ForeignKey("comment_tags.id", ondelete="CASCADE"), primary_key=True,
        ),
    )

    op.create_table(
        "updates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("group_id", sa.Integer, sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False, server_default=""),
        sa.Column("send_email", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
    )
    op.create_index("idx_update_group_created", "updates", ["group_id", "created_at"])
    op.create_index("ix_updates_user_id", "updates", ["user_id"])
    op.create_index("ix_updates_deleted_at", "updates", ["deleted_at"])

    op.create_table(
        "announcements",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("send_email", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
    )
    op.create_index("ix_announcements_user_id", "announcements", ["user_id"])
    op.create_index("ix_announcements_created_at", "announcements", ["created_at"])
    op.create_index("ix_announcements_deleted_at", "announcements", ["deleted_at"])

    op.create_table(
        "user_skill_tags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("group_id", sa.Integer, sa.ForeignKey("groups.id"), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("color", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_user_skill_tags_group_id", "user_skill_tags", ["group_id"])
    op.create_index("ix_user_skill_tags_deleted_at", "user_skill_tags", ["deleted_at"])

    op.create_table(
        "user_skill_tag_assignments",
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "user_skill_tag_id", sa.Integer,
            sa.ForeignKey("user_skill_tags.id", ondelete="CASCADE"), primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("user_skill_tag_assignments")
    op.drop_table("user_skill_tags")
    op.drop_table("announcements")
    op.drop_table("updates")
    op.drop_table("animal_comment_tags")
    op.drop_table("animal_comments")
    op.drop_table("comment_tags")
    op.drop_table("animals")
    op.drop_table("user_groups")
    op.drop_table("groups")
    op.drop_table("users")
