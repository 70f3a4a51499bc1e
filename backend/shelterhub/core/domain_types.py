"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, GroupId, TagId wrap ints — never pass bare ids between layers without intent
    - Principal is built only by authentication; is_site_admin is never derived from membership
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and store in String columns without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
GroupId = NewType("GroupId", int)
AnimalId = NewType("AnimalId", int)
TagId = NewType("TagId", int)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""
    user_id: UserId
    is_site_admin: bool = False


# ─── Enums ───────────────────────────────────────────────────────

class MembershipRole(str, Enum):
    """Role attached to a UserGroup row — maps to DB `role` column."""
    MEMBER = "member"
    ADMIN = "admin"


class AccessLevel(str, Enum):
    """Level a caller must hold on a group for an operation."""
    MEMBER = "member"
    GROUP_ADMIN = "group_admin"


class FeedType(str, Enum):
    """Activity feed source filter."""
    ALL = "all"
    COMMENTS = "comments"
    ANNOUNCEMENTS = "announcements"


class FeedItemKind(str, Enum):
    """Discriminator of a merged feed item."""
    COMMENT = "comment"
    ANNOUNCEMENT = "announcement"


class AnimalStatus(str, Enum):
    """Animal custody states — maps to DB `status` column."""
    AVAILABLE = "available"
    FOSTER = "foster"
    BITE_QUARANTINE = "bite_quarantine"
    ARCHIVED = "archived"
