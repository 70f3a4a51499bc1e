"""Skill Tag Rules — pure validation for replacing a member's group-scoped skill tags.

Invariants:
    - Requested ids are de-duplicated preserving first occurrence
    - Every requested id must be owned by the target group, otherwise nothing is applied
    - An empty request is valid and clears the member's tags for that group

Design Decisions:
    - Returns the offending ids instead of a bool so the 400 can name them
"""

from typing import Iterable

from shelterhub.core.errors import ValidationFailedError


def dedupe_tag_ids(tag_ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(tag_ids))


def foreign_tag_ids(requested: Iterable[int], owned: Iterable[int]) -> list[int]:
    """Requested ids that the group does not own, in request order."""
    owned_set = set(owned)
    return [tag_id for tag_id in requested if tag_id not in owned_set]


def check_tag_ownership(group_id: int, requested: list[int], owned: Iterable[int]) -> None:
    """Raise ValidationFailedError when any requested id is outside the group."""
    invalid = foreign_tag_ids(requested, owned)
    if invalid:
        raise ValidationFailedError(
            "One or more tag IDs do not belong to this group",
            field="tag_ids",
            details={"group_id": group_id, "invalid_tag_ids": invalid},
        )
