"""
Models for users.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from . import Base


class User(Base):
    """
    SQLAlchemy model for application users.

    Attributes:
        id (int): Primary key.
        email (str): Unique email address.
        name (Optional[str]): Display name.
        github_username (Optional[str]): Unique GitHub login used to attribute webhook activity.
        created_at (datetime): Creation timestamp.
        updated_at (datetime): Last update timestamp.
    """

    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True, index=True)
    email: Mapped[str] = mapped_column(nullable=False, unique=True, index=True)
    name: Mapped[Optional[str]]
    github_username: Mapped[Optional[str]] = mapped_column(
        nullable=True, unique=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),  # pylint: disable=not-callable
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),  # pylint: disable=not-callable
        onupdate=func.now(),  # pylint: disable=not-callable
        nullable=False,
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', github_username='{self.github_username}')>"
