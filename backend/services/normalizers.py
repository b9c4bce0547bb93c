"""
Per-event normalizers that turn GitHub webhook payloads into activity records.

Each normalizer validates its payload once, resolves the acting GitHub
login to an internal user and writes zero or more ``GitActivity`` rows.
Events whose actor has no mapped user are skipped without error.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import utils.logging
from app.models.activity import TITLE_MAX_LENGTH, ActivityType, GitActivity
from app.models.user import User
from app.schemas.activity import ActivityCreate
from app.schemas.github import (
    IssuesEvent,
    PullRequestEvent,
    PullRequestReviewEvent,
    PushEvent,
)
from services.activity_store import ActivityStore

logger = utils.logging.get_logger(__name__)

PULL_REQUEST_ACTIONS = frozenset({"opened", "reopened", "closed"})
ISSUE_ACTIONS = frozenset({"opened", "closed", "reopened"})
REVIEW_ACTION = "submitted"

REVIEW_STATE_LABELS = {
    "approved": "Approved",
    "changes_requested": "Changes requested",
}


def truncate_title(title: str) -> str:
    return title[:TITLE_MAX_LENGTH]


def first_line(message: Optional[str]) -> str:
    if not message:
        return ""
    return message.splitlines()[0]


def review_state_label(state: Optional[str]) -> str:
    """Label for a review state; anything but approval or requested changes is a comment."""
    return REVIEW_STATE_LABELS.get((state or "").lower(), "Commented")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _resolve(store: ActivityStore, username: Optional[str], context: str) -> Optional[User]:
    if not username:
        logger.info(f"No GitHub login on {context}; skipping")
        return None

    user = store.find_user_by_github_username(username)
    if user is None:
        logger.info(f"GitHub user {username} is not mapped to a user; skipping {context}")
    return user


def normalize_push(payload: dict[str, Any], store: ActivityStore) -> list[GitActivity]:
    """
    Store one COMMIT activity per commit whose author resolves to a user.

    Commits are processed in payload order and each is independent: an
    unresolved author only skips that commit. ``additions`` counts added
    plus modified files and ``deletions`` counts removed files.

    :param payload: Parsed ``push`` event body.
    :param store: Activity store for lookups and inserts.
    :return: The stored activities, possibly empty.
    """
    event = PushEvent.model_validate(payload)
    repository = event.repository_name
    activities = []

    for commit in event.commits:
        username = commit.author.username if commit.author else None
        user = _resolve(store, username, f"commit {commit.id}")
        if user is None:
            continue

        record = ActivityCreate(
            type=ActivityType.COMMIT,
            title=truncate_title(first_line(commit.message)),
            description=commit.message or "",
            sha=commit.id,
            repository=repository,
            branch=event.branch,
            url=commit.url,
            additions=len(commit.added) + len(commit.modified),
            deletions=len(commit.removed),
            user_id=user.id,
            timestamp=commit.timestamp or _now(),
        )
        activities.append(store.insert(record))

    return activities


def normalize_pull_request(
    payload: dict[str, Any], store: ActivityStore
) -> Optional[GitActivity]:
    """
    Store a PULL_REQUEST or MERGE activity for opened, reopened and closed actions.

    The event sender is the actor. A close with ``merged`` set becomes a
    MERGE; any other close stays a PULL_REQUEST.

    :return: The stored activity, or None when the event was ignored.
    """
    event = PullRequestEvent.model_validate(payload)
    if event.action not in PULL_REQUEST_ACTIONS:
        return None

    number = event.pr_number
    user = _resolve(store, event.sender_login, f"pull request #{number}")
    if user is None:
        return None

    pr = event.pull_request
    head = pr.head
    base = pr.base
    head_ref = head.ref if head else None
    base_ref = base.ref if base else None

    if event.action == "closed" and pr.merged:
        activity_type = ActivityType.MERGE
        title = f"Merged: PR #{number} - {pr.title or ''}"
        description = f"Merged pull request #{number} into {base_ref or 'unknown'}"
    else:
        activity_type = ActivityType.PULL_REQUEST
        title = f"PR #{number}: {pr.title or ''}"
        description = pr.body or ""

    record = ActivityCreate(
        type=activity_type,
        title=truncate_title(title),
        description=description,
        sha=head.sha if head else None,
        repository=event.repository_name,
        branch=head_ref,
        url=pr.html_url,
        additions=pr.additions or 0,
        deletions=pr.deletions or 0,
        user_id=user.id,
        timestamp=_now(),
    )
    return store.insert(record)


def normalize_pull_request_review(
    payload: dict[str, Any], store: ActivityStore
) -> Optional[GitActivity]:
    """Store a REVIEW activity for a submitted pull request review."""
    event = PullRequestReviewEvent.model_validate(payload)
    if event.action != REVIEW_ACTION:
        return None

    pr = event.pull_request
    user = _resolve(store, event.sender_login, f"review on pull request #{pr.number}")
    if user is None:
        return None

    review = event.review
    label = review_state_label(review.state)
    record = ActivityCreate(
        type=ActivityType.REVIEW,
        title=truncate_title(f"Review on PR #{pr.number}: {label}"),
        description=review.body or f'{label} on "{pr.title or ""}"',
        repository=event.repository_name,
        branch=pr.head.ref if pr.head else None,
        url=review.html_url or pr.html_url,
        user_id=user.id,
        timestamp=review.submitted_at or _now(),
    )
    return store.insert(record)


def normalize_issues(payload: dict[str, Any], store: ActivityStore) -> Optional[GitActivity]:
    """Store an ISSUE activity for opened, closed and reopened issues."""
    event = IssuesEvent.model_validate(payload)
    if event.action not in ISSUE_ACTIONS:
        return None

    issue = event.issue
    user = _resolve(store, event.sender_login, f"issue #{issue.number}")
    if user is None:
        return None

    record = ActivityCreate(
        type=ActivityType.ISSUE,
        title=truncate_title(
            f"{event.action.capitalize()} Issue #{issue.number}: {issue.title or ''}"
        ),
        description=issue.body or "",
        repository=event.repository_name,
        url=issue.html_url,
        user_id=user.id,
        timestamp=_now(),
    )
    return store.insert(record)
