"""Skill Tag Rules — verifies dedupe and group-ownership checks.

Tests:
    - Duplicates collapse keeping first occurrence
    - Foreign ids are reported in request order
    - check_tag_ownership raises a 400 naming the offending ids
"""

import pytest

from shelterhub.core.errors import ValidationFailedError
from shelterhub.core.skill_tag_rules import (
    check_tag_ownership, dedupe_tag_ids, foreign_tag_ids,
)


def test_dedupe_keeps_first_occurrence():
    assert dedupe_tag_ids([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_foreign_ids_in_request_order():
    assert foreign_tag_ids([9, 1, 7, 2], owned=[1, 2, 3]) == [9, 7]


def test_empty_request_is_valid():
    check_tag_ownership(1, [], owned=[1, 2])


def test_owned_request_passes():
    check_tag_ownership(1, [2, 1], owned=[1, 2, 3])


def test_foreign_id_raises_with_details():
    with pytest.raises(ValidationFailedError) as exc_info:
        check_tag_ownership(4, [1, 8], owned=[1, 2])
    err = exc_info.value
    assert err.field == "tag_ids"
    assert err.details == {"group_id": 4, "invalid_tag_ids": [8]}
    assert err.to_response()["error"]["code"] == "VALIDATION_ERROR"
