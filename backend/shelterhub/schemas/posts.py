"""Post Schemas — group updates and site-wide announcements.

Invariants:
    - title: 2-200 chars; content: at least 10 chars (both stripped)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _PostBody(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=2, max_length=200)
    content: str = Field(min_length=10, max_length=20_000)
    send_email: bool = False


class UpdateCreate(_PostBody):
    image_url: str = Field("", max_length=500)


class AnnouncementCreate(_PostBody):
    pass


class PostAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str


class UpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    group_id: int
    title: str
    content: str
    image_url: str
    send_email: bool
    created_at: datetime
    author: PostAuthor | None = None


class AnnouncementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    send_email: bool
    created_at: datetime
    author: PostAuthor | None = None
