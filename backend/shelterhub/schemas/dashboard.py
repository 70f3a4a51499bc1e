"""Dashboard Schemas — site-admin statistics and paged rollups, read from the
reporting dataclasses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RecentUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    is_admin: bool
    created_at: datetime


class ActiveGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_id: int
    group_name: str
    user_count: int
    animal_count: int
    comment_count: int
    last_activity: datetime | None


class AnimalAlertResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    animal_id: int
    animal_name: str
    group_id: int
    group_name: str
    image_url: str
    alert_tags: list[str]
    last_comment: datetime


class SystemHealthResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    active_users_last_24h: int
    comments_last_24h: int
    new_users_last_7_days: int
    average_comments_per_day: float


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_users: int
    total_groups: int
    total_animals: int
    total_comments: int
    recent_users: list[RecentUserResponse]
    most_active_groups: list[ActiveGroupResponse]
    animals_needing_attention: list[AnimalAlertResponse]
    system_health: SystemHealthResponse


class GroupStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_id: int
    group_name: str
    user_count: int
    animal_count: int
    last_activity: datetime | None


class UserStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: str
    comment_count: int
    last_active: datetime | None
    animals_interacted_with: int


class CommentTagStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tag_id: int
    tag_name: str
    group_id: int
    usage_count: int
    last_used: datetime | None
    most_tagged_animal_id: int | None
    most_tagged_animal_name: str | None


class _StatisticsPageResponse(BaseModel):
    """Built with model_validate(page) so has_more is read off the page."""
    model_config = ConfigDict(from_attributes=True)

    total: int
    limit: int
    offset: int
    has_more: bool


class GroupStatisticsPageResponse(_StatisticsPageResponse):
    items: list[GroupStatisticsResponse]


class UserStatisticsPageResponse(_StatisticsPageResponse):
    items: list[UserStatisticsResponse]


class CommentTagStatisticsPageResponse(_StatisticsPageResponse):
    items: list[CommentTagStatisticsResponse]
