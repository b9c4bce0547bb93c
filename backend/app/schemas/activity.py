"""
Pydantic schemas for git activity records.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..models.activity import TITLE_MAX_LENGTH, ActivityType
from .user import UserSummary


def to_utc(value: datetime) -> datetime:
    """
    Convert to an aware UTC datetime. Naive values are taken to be UTC.

    The SQLite DateTime type stores wall-clock time and drops the offset,
    so every timestamp is stored and compared in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ActivityCreate(BaseModel):
    """
    A normalized activity ready to be persisted.

    Attributes:
        type (ActivityType): Kind of activity.
        title (str): Summary line, at most 200 characters.
        description (str): Free text.
        sha (Optional[str]): Commit SHA, commits and pull requests only.
        repository (str): Repository full name.
        branch (Optional[str]): Branch name.
        url (Optional[str]): Link to the originating object.
        additions (int): Added count.
        deletions (int): Deleted count.
        user_id (int): Acting user.
        timestamp (datetime): When the activity happened.
    """

    type: ActivityType
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str = ""
    sha: Optional[str] = None
    repository: str
    branch: Optional[str] = None
    url: Optional[str] = None
    additions: int = 0
    deletions: int = 0
    user_id: int
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _timestamp_in_utc(cls, value: datetime) -> datetime:
        return to_utc(value)


class Activity(BaseModel):
    """
    Pydantic schema for a stored activity record.
    """

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: int
    type: ActivityType
    title: str
    description: str
    sha: Optional[str]
    repository: str
    branch: Optional[str]
    url: Optional[str]
    additions: int
    deletions: int
    user_id: int
    timestamp: datetime
    created_at: Optional[datetime] = None
    user: Optional[UserSummary] = None


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    limit: int
    offset: int
    has_more: bool


class ActivityPage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: list[Activity]
    pagination: Pagination
