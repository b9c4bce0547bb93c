"""
Pydantic schemas for inbound GitHub webhook payloads.

Only the fields the normalizers read are declared. Every field is
optional so that partial payloads validate; unknown fields are ignored.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)


def _none_if_invalid(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


# An unparseable timestamp only loses the timestamp, not the event
LenientDatetime = Annotated[Optional[datetime], WrapValidator(_none_if_invalid)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Account(_Payload):
    login: Optional[str] = None


class Repository(_Payload):
    full_name: Optional[str] = None
    html_url: Optional[str] = None


class CommitAuthor(_Payload):
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None


class Commit(_Payload):
    id: Optional[str] = None
    message: Optional[str] = None
    timestamp: LenientDatetime = None
    url: Optional[str] = None
    author: Optional[CommitAuthor] = None
    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)


class _RepositoryEvent(_Payload):
    repository: Optional[Repository] = None
    sender: Optional[Account] = None

    @property
    def repository_name(self) -> str:
        if self.repository and self.repository.full_name:
            return self.repository.full_name
        return "unknown"

    @property
    def sender_login(self) -> Optional[str]:
        return self.sender.login if self.sender else None


class PushEvent(_RepositoryEvent):
    ref: Optional[str] = None
    commits: list[Commit] = Field(default_factory=list)

    @property
    def branch(self) -> Optional[str]:
        if not self.ref:
            return None
        return self.ref.removeprefix("refs/heads/")


class GitRef(_Payload):
    ref: Optional[str] = None
    sha: Optional[str] = None


class PullRequest(_Payload):
    number: Optional[int] = None
    title: Optional[str] = None
    body: Optional[str] = None
    html_url: Optional[str] = None
    merged: Optional[bool] = False
    additions: Optional[int] = 0
    deletions: Optional[int] = 0
    head: Optional[GitRef] = None
    base: Optional[GitRef] = None
    user: Optional[Account] = None


class PullRequestEvent(_RepositoryEvent):
    action: Optional[str] = None
    number: Optional[int] = None
    pull_request: PullRequest = Field(default_factory=PullRequest)

    @property
    def pr_number(self) -> Optional[int]:
        return self.number if self.number is not None else self.pull_request.number


class Review(_Payload):
    state: Optional[str] = None
    body: Optional[str] = None
    html_url: Optional[str] = None
    submitted_at: LenientDatetime = None


class PullRequestReviewEvent(_RepositoryEvent):
    action: Optional[str] = None
    review: Review = Field(default_factory=Review)
    pull_request: PullRequest = Field(default_factory=PullRequest)


class Issue(_Payload):
    number: Optional[int] = None
    title: Optional[str] = None
    body: Optional[str] = None
    html_url: Optional[str] = None


class IssuesEvent(_RepositoryEvent):
    action: Optional[str] = None
    issue: Issue = Field(default_factory=Issue)
