"""Feed Schemas — wire shape of the merged group activity feed.

Invariants:
    - `type` discriminates items: "comment" carries animal and tags,
      "announcement" carries title
    - has_more == offset + len(items) < total
"""

from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel, Field

from shelterhub.core.feed_merge import AnnouncementItem, CommentItem, FeedAuthor, FeedPage


class FeedAuthorResponse(BaseModel):
    id: int
    username: str
    first_name: str = ""
    last_name: str = ""

    @classmethod
    def from_author(cls, author: FeedAuthor | None) -> "FeedAuthorResponse | None":
        if author is None:
            return None
        return cls(
            id=author.id, username=author.username,
            first_name=author.first_name, last_name=author.last_name,
        )


class CommentFeedItem(BaseModel):
    type: Literal["comment"] = "comment"
    id: int
    created_at: datetime
    user: FeedAuthorResponse | None
    content: str
    image_url: str = ""
    animal_id: int
    animal_name: str
    tags: list[str] = Field(default_factory=list)


class AnnouncementFeedItem(BaseModel):
    type: Literal["announcement"] = "announcement"
    id: int
    created_at: datetime
    user: FeedAuthorResponse | None
    title: str
    content: str
    image_url: str = ""


class FeedResponse(BaseModel):
    items: list[Union[CommentFeedItem, AnnouncementFeedItem]]
    total: int
    limit: int
    offset: int
    has_more: bool

    @classmethod
    def from_page(cls, page: FeedPage) -> "FeedResponse":
        items: list[Union[CommentFeedItem, AnnouncementFeedItem]] = []
        for item in page.items:
            if isinstance(item, CommentItem):
                items.append(CommentFeedItem(
                    id=item.id,
                    created_at=item.created_at,
                    user=FeedAuthorResponse.from_author(item.author),
                    content=item.content,
                    image_url=item.image_url,
                    animal_id=item.animal_id,
                    animal_name=item.animal_name,
                    tags=list(item.tags),
                ))
            elif isinstance(item, AnnouncementItem):
                items.append(AnnouncementFeedItem(
                    id=item.id,
                    created_at=item.created_at,
                    user=FeedAuthorResponse.from_author(item.author),
                    title=item.title,
                    content=item.content,
                    image_url=item.image_url,
                ))
        return cls(
            items=items,
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.has_more,
        )
