"""
Tests for the User SQLAlchemy model.

Covers:
- Creating and persisting a User.
- Optional fields.
- Unique constraints (email, github_username).
- __repr__ output.
"""

import pytest
from app.models.user import User
from sqlalchemy.exc import IntegrityError
from tests.conftest import make_user


class TestUserCreation:
    """Tests for basic User creation and field persistence."""

    def test_create_user_minimal(self, db_session):
        """User can be created with only required fields."""
        user = User(email="minimal@example.com")
        db_session.add(user)
        db_session.flush()

        assert user.id is not None
        assert user.name is None
        assert user.github_username is None

    def test_timestamps_are_set_by_server(self, db_session):
        user = make_user()
        db_session.add(user)
        db_session.flush()
        db_session.refresh(user)

        assert user.created_at is not None
        assert user.updated_at is not None


class TestUserConstraints:
    """Tests for unique constraints."""

    def test_duplicate_email_raises(self, db_session):
        db_session.add(make_user(email="same@example.com", github_username="a"))
        db_session.add(make_user(email="same@example.com", github_username="b"))
        with pytest.raises(IntegrityError):
            db_session.flush()

    def test_duplicate_github_username_raises(self, db_session):
        db_session.add(make_user(email="a@example.com", github_username="octocat"))
        db_session.add(make_user(email="b@example.com", github_username="octocat"))
        with pytest.raises(IntegrityError):
            db_session.flush()

    def test_many_users_without_github_username(self, db_session):
        """github_username is nullable and NULLs do not collide."""
        db_session.add(User(email="a@example.com"))
        db_session.add(User(email="b@example.com"))
        db_session.flush()


class TestUserRepr:
    def test_repr(self, db_session):
        user = make_user(email="repr@example.com", github_username="octocat")
        db_session.add(user)
        db_session.flush()

        assert repr(user) == (
            f"<User(id={user.id}, email='repr@example.com', github_username='octocat')>"
        )
