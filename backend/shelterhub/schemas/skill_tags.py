"""Skill Tag Schemas — tag definitions and member assignment requests.

Invariants:
    - name: 1-50 chars after stripping
    - color: hex color, "#" followed by 3-8 hex digits
    - tag_ids may be empty (clears the member's tags); duplicates are collapsed later
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{3,8}$"


class SkillTagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: str = Field(pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class SkillTagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: int
    name: str
    color: str
    created_at: datetime


class SkillTagAssignment(BaseModel):
    tag_ids: list[int] = Field(default_factory=list, max_length=100)


class SkillTagAssignmentResponse(BaseModel):
    user_id: int
    group_id: int
    tags: list[SkillTagResponse]
