"""Animal Schemas — animals, comment tags and comments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shelterhub.core.domain_types import AnimalStatus


class AnimalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    status: AnimalStatus = AnimalStatus.AVAILABLE
    image_url: str = Field("", max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class AnimalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: int
    name: str
    status: AnimalStatus
    image_url: str
    created_at: datetime


class CommentTagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
    is_system: bool


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=10_000)
    image_url: str = Field("", max_length=500)
    tag_ids: list[int] = Field(default_factory=list, max_length=50)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty or whitespace")
        return v


class CommentAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    animal_id: int
    content: str
    image_url: str
    created_at: datetime
    author: CommentAuthor | None = None
    tags: list[CommentTagResponse] = Field(default_factory=list)
