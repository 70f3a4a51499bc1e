"""Request Schemas — verifies boundary validation of request bodies.

Invariants:
    - Skill tag color is "#" plus 3-8 hex digits; name 1-50 chars
    - Post title 2-200 chars, content at least 10, both stripped first
    - Comment content cannot be blank
"""

import pytest
from pydantic import ValidationError

from shelterhub.core.domain_types import AnimalStatus
from shelterhub.schemas.animals import AnimalCreate, CommentCreate
from shelterhub.schemas.groups import GroupCreate
from shelterhub.schemas.posts import AnnouncementCreate, UpdateCreate
from shelterhub.schemas.skill_tags import SkillTagAssignment, SkillTagCreate


# --- SkillTagCreate -----------------------------------------------------------

@pytest.mark.parametrize("color", ["#fff", "#22c55e", "#22C55EAA"])
def test_skill_tag_accepts_hex_colors(color):
    assert SkillTagCreate(name="Dogs", color=color).color == color


@pytest.mark.parametrize("color", ["red", "#ff", "22c55e", "#22c55e001", "#ggg"])
def test_skill_tag_rejects_bad_colors(color):
    with pytest.raises(ValidationError):
        SkillTagCreate(name="Dogs", color=color)


def test_skill_tag_name_bounds():
    with pytest.raises(ValidationError):
        SkillTagCreate(name="", color="#fff")
    with pytest.raises(ValidationError):
        SkillTagCreate(name="x" * 51, color="#fff")
    with pytest.raises(ValidationError):
        SkillTagCreate(name="   ", color="#fff")


def test_assignment_defaults_to_empty():
    assert SkillTagAssignment().tag_ids == []


# --- posts --------------------------------------------------------------------

def test_update_strips_before_length_check():
    with pytest.raises(ValidationError):
        UpdateCreate(title="  A  ", content="long enough content")


def test_announcement_content_minimum():
    with pytest.raises(ValidationError):
        AnnouncementCreate(title="Notice", content="too short")


def test_announcement_defaults():
    body = AnnouncementCreate(title=" Notice ", content="Closed on Monday for cleaning")
    assert body.title == "Notice"
    assert body.send_email is False


# --- animals & groups ---------------------------------------------------------

def test_animal_defaults_to_available():
    assert AnimalCreate(name="Biscuit").status is AnimalStatus.AVAILABLE


def test_animal_rejects_unknown_status():
    with pytest.raises(ValidationError):
        AnimalCreate(name="Biscuit", status="lost")


def test_comment_rejects_blank_content():
    with pytest.raises(ValidationError):
        CommentCreate(content="   ")


def test_group_name_is_stripped():
    assert GroupCreate(name="  North Kennel ").name == "North Kennel"
