"""Group Schemas — groups, membership and member listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shelterhub.core.domain_types import MembershipRole


class GroupCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = Field("", max_length=2000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must have at least 2 non-space characters")
        return v


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    created_at: datetime


class MembershipInfoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_id: int
    is_member: bool
    is_group_admin: bool
    is_site_admin: bool


class MemberSkillTag(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str


class MemberResponse(BaseModel):
    user_id: int
    username: str
    first_name: str
    last_name: str
    role: MembershipRole
    skill_tags: list[MemberSkillTag] = Field(default_factory=list)


class MembershipChangeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    group_id: int
    role: MembershipRole
