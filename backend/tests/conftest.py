"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database so store, normalizer and
HTTP tests can commit freely without leaking rows into each other.
"""

from datetime import datetime, timezone

import pytest
from app.main import create_app
from app.models.activity import ActivityType, GitActivity
from app.models.user import User
from fastapi.testclient import TestClient
from services.activity_store import ActivityStore
from sqlalchemy import event as sa_event
from sqlalchemy.orm import Session
from utils.database import Database
from utils.redis_client import RedisClient


@pytest.fixture
def database() -> Database:
    """
    Provide an in-memory SQLite database with the schema created.
    """
    _database = Database("sqlite://")

    @sa_event.listens_for(_database.engine, "connect")
    def set_sqlite_pragma(dbapi_connection, _):
        """Enable foreign key enforcement in SQLite."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    _database.create_all()
    yield _database
    _database.drop_all()
    _database.dispose()


@pytest.fixture
def db_session(database) -> Session:
    with database.session() as session:
        yield session


@pytest.fixture
def store(db_session) -> ActivityStore:
    return ActivityStore(db_session)


@pytest.fixture
def client(database, monkeypatch):
    """
    HTTP client for an app bound to the test database, with no webhook
    secret and the delivery ledger disabled unless a test opts in.
    """
    monkeypatch.delenv("GITHUB_WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("WEBHOOK_DEDUPE_DELIVERIES", raising=False)
    RedisClient._instance = None
    with TestClient(create_app(database=database)) as test_client:
        yield test_client


# ---------------------------------------------------------------------------
# Reusable model factory helpers
# ---------------------------------------------------------------------------


def make_user(
    email: str = "test@example.com",
    name: str = "Test User",
    github_username: str = "gh-testuser",
) -> User:
    """Return a new, unsaved User instance with sensible defaults."""
    return User(email=email, name=name, github_username=github_username)


def add_user(session: Session, **kwargs) -> User:
    """Persist a User and return it."""
    user = make_user(**kwargs)
    session.add(user)
    session.commit()
    return user


def make_activity(user_id: int, **overrides) -> GitActivity:
    """Return a new, unsaved GitActivity instance."""
    fields = dict(
        type=ActivityType.COMMIT,
        title="Add feature X",
        description="Add feature X\n\nDetails",
        sha="abc123",
        repository="org/repo",
        branch="main",
        url="https://github.com/org/repo/commit/abc123",
        additions=3,
        deletions=1,
        user_id=user_id,
        timestamp=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return GitActivity(**fields)


# ---------------------------------------------------------------------------
# GitHub payload builders
# ---------------------------------------------------------------------------


def commit_payload(
    sha: str,
    username,
    message: str = "Fix bug",
    added=(),
    removed=(),
    modified=(),
    timestamp: str = "2024-03-15T12:00:00+00:00",
) -> dict:
    return {
        "id": sha,
        "message": message,
        "timestamp": timestamp,
        "url": f"https://github.com/org/repo/commit/{sha}",
        "author": {"name": "Someone", "email": "someone@example.com", "username": username},
        "added": list(added),
        "removed": list(removed),
        "modified": list(modified),
    }


def push_payload(*commits, ref: str = "refs/heads/main") -> dict:
    return {
        "ref": ref,
        "repository": {"full_name": "org/repo"},
        "sender": {"login": "gh-testuser"},
        "commits": list(commits),
    }


def pull_request_payload(
    action: str = "opened",
    merged: bool = False,
    sender: str = "gh-testuser",
    number: int = 42,
    title: str = "Add feature X",
    body="Implements feature X",
) -> dict:
    return {
        "action": action,
        "number": number,
        "repository": {"full_name": "org/repo"},
        "sender": {"login": sender},
        "pull_request": {
            "number": number,
            "title": title,
            "body": body,
            "html_url": f"https://github.com/org/repo/pull/{number}",
            "merged": merged,
            "additions": 120,
            "deletions": 30,
            "head": {"ref": "feature/x", "sha": "deadbeef"},
            "base": {"ref": "main", "sha": "cafebabe"},
            "user": {"login": "pr-author"},
        },
    }


def review_payload(
    state: str = "approved",
    action: str = "submitted",
    body="Looks good",
    sender: str = "gh-testuser",
) -> dict:
    return {
        "action": action,
        "repository": {"full_name": "org/repo"},
        "sender": {"login": sender},
        "review": {
            "state": state,
            "body": body,
            "html_url": "https://github.com/org/repo/pull/42#pullrequestreview-1",
            "submitted_at": "2024-03-15T13:00:00Z",
        },
        "pull_request": {
            "number": 42,
            "title": "Add feature X",
            "html_url": "https://github.com/org/repo/pull/42",
            "head": {"ref": "feature/x", "sha": "deadbeef"},
        },
    }


def issues_payload(
    action: str = "opened",
    sender: str = "gh-testuser",
    title: str = "Crash on login",
    body="Steps to reproduce",
) -> dict:
    return {
        "action": action,
        "repository": {"full_name": "org/repo"},
        "sender": {"login": sender},
        "issue": {
            "number": 7,
            "title": title,
            "body": body,
            "html_url": "https://github.com/org/repo/issues/7",
        },
    }
