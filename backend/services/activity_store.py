"""
Persistence for normalized activity records and the user lookup the
webhook normalizers depend on.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

import utils.logging
from app.models.activity import ActivityType, GitActivity
from app.models.user import User
from app.schemas.activity import ActivityCreate, to_utc

logger = utils.logging.get_logger(__name__)

MAX_PAGE_SIZE = 500


@dataclass
class ActivityFilter:
    """Optional filters for listing stored activity."""

    type: Optional[ActivityType] = None
    user_id: Optional[int] = None
    repository: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self):
        # Stored timestamps are UTC wall-clock values
        if self.start is not None:
            self.start = to_utc(self.start)
        if self.end is not None:
            self.end = to_utc(self.end)


class ActivityStore:
    """
    Thin data access layer over a SQLAlchemy session.

    Each ``insert`` commits on its own, so records written before a
    failure inside one delivery stay persisted.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_user_by_github_username(self, username: str) -> Optional[User]:
        """
        Look up the user whose GitHub login equals ``username`` exactly.
        :param username: GitHub login, compared case-sensitively.
        :return: The user, or None when nobody is mapped to that login.
        """
        stmt = select(User).where(User.github_username == username)
        return self.session.scalars(stmt).one_or_none()

    def insert(self, record: ActivityCreate) -> GitActivity:
        """
        Persist one activity record.

        :raise sqlalchemy.exc.SQLAlchemyError: Storage errors are not caught here.
        :return: The stored row.
        """
        activity = GitActivity(**record.model_dump())
        self.session.add(activity)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(activity)
        logger.debug(
            f"Stored {activity.type.value} activity {activity.id} for user {activity.user_id}"
        )
        return activity

    @staticmethod
    def _conditions(filters: ActivityFilter) -> list:
        conditions = []
        if filters.type is not None:
            conditions.append(GitActivity.type == filters.type)
        if filters.user_id is not None:
            conditions.append(GitActivity.user_id == filters.user_id)
        if filters.repository:
            conditions.append(GitActivity.repository.icontains(filters.repository))
        if filters.start is not None:
            conditions.append(GitActivity.timestamp >= filters.start)
        if filters.end is not None:
            conditions.append(GitActivity.timestamp <= filters.end)
        return conditions

    def page(
        self, filters: ActivityFilter, limit: int = 100, offset: int = 0
    ) -> tuple[list[GitActivity], int]:
        """
        Return one page of activity, newest first, and the total match count.
        :param filters: Filters applied to both the page and the count.
        :param limit: Page size, capped at 500.
        :param offset: Number of matching rows to skip.
        """
        conditions = self._conditions(filters)
        stmt = (
            select(GitActivity)
            .where(*conditions)
            .order_by(GitActivity.timestamp.desc(), GitActivity.id.desc())
            .limit(min(limit, MAX_PAGE_SIZE))
            .offset(offset)
        )
        rows = list(self.session.scalars(stmt).unique())
        total = self.session.scalar(
            select(func.count()).select_from(GitActivity).where(*conditions)  # pylint: disable=not-callable
        )
        return rows, total or 0
