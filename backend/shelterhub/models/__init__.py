"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Group is the authorization root; animals, updates and tags are scoped by group_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from shelterhub.models.user import User  # noqa: F401
from shelterhub.models.group import Group  # noqa: F401
from shelterhub.models.user_group import UserGroup  # noqa: F401
from shelterhub.models.animal import Animal  # noqa: F401
from shelterhub.models.comment_tag import CommentTag  # noqa: F401
from shelterhub.models.animal_comment import AnimalComment, animal_comment_tags  # noqa: F401
from shelterhub.models.update import Update  # noqa: F401
from shelterhub.models.announcement import Announcement  # noqa: F401
from shelterhub.models.user_skill_tag import UserSkillTag, user_skill_tag_assignments  # noqa: F401
