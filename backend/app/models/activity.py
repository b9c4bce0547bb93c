"""
Models for normalized git activity.

Classes:
    ActivityType (Enum): Kind of developer activity.
    GitActivity (Base): One normalized unit of activity attributed to a user.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import DateTime

from . import Base
from .user import User

TITLE_MAX_LENGTH = 200


class ActivityType(Enum):
    """
    Enum representing the kind of activity.

    Attributes:
        COMMIT: A pushed commit.
        PULL_REQUEST: A pull request opened, reopened or closed without merging.
        REVIEW: A submitted pull request review.
        MERGE: A pull request closed with merged=true.
        ISSUE: An issue opened, closed or reopened.
    """

    COMMIT = "COMMIT"
    PULL_REQUEST = "PULL_REQUEST"
    REVIEW = "REVIEW"
    MERGE = "MERGE"
    ISSUE = "ISSUE"


class GitActivity(Base):
    """
    SQLAlchemy model for normalized activity records.

    Records are written once at ingestion and never updated by the
    webhook path.

    Attributes:
        id (int): Primary key.
        type (ActivityType): Kind of activity.
        title (str): Single-line summary, at most 200 characters.
        description (str): Free text, may be empty.
        sha (Optional[str]): Commit SHA for commits and pull requests.
        repository (str): Repository full name, e.g. "org/repo".
        branch (Optional[str]): Branch name.
        url (Optional[str]): Link to the originating object.
        additions (int): Added count (file touches for commits).
        deletions (int): Deleted count (file touches for commits).
        user_id (int): Foreign key to the acting user.
        timestamp (datetime): When the activity happened.
        created_at (datetime): When the record was ingested.
    """

    __tablename__ = "git_activity"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    type: Mapped[ActivityType] = mapped_column(SQLEnum(ActivityType), nullable=False)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sha: Mapped[Optional[str]] = mapped_column(nullable=True)
    repository: Mapped[str] = mapped_column(nullable=False, index=True)
    branch: Mapped[Optional[str]] = mapped_column(nullable=True)
    url: Mapped[Optional[str]] = mapped_column(nullable=True)
    additions: Mapped[int] = mapped_column(nullable=False, default=0)
    deletions: Mapped[int] = mapped_column(nullable=False, default=0)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"), index=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),  # pylint: disable=not-callable
    )

    user: Mapped[User] = relationship(lazy="joined")

    def __repr__(self) -> str:
        return f"GitActivity(id={self.id}, type={self.type.value}, user_id={self.user_id})"
