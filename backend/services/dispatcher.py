"""
Routes GitHub webhook events to their normalizers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

import utils.logging
from app.models.activity import GitActivity
from services import normalizers
from services.activity_store import ActivityStore

logger = utils.logging.get_logger(__name__)

NormalizerResult = Union[list[GitActivity], GitActivity, None]
Normalizer = Callable[[dict[str, Any], ActivityStore], NormalizerResult]


class GitHubEvent(Enum):
    """Values of the ``X-GitHub-Event`` header this service recognizes."""

    PUSH = "push"
    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"
    ISSUES = "issues"
    PING = "ping"


class DispatchStatus(Enum):
    PROCESSED = "processed"
    PING = "ping"
    UNSUPPORTED = "unsupported"


@dataclass
class DispatchResult:
    """
    Outcome of one dispatch.

    Attributes:
        event (str): The event name as received.
        status (DispatchStatus): Whether a normalizer ran.
        activities (list[GitActivity]): Records written by the normalizer.
        result (NormalizerResult): Raw normalizer return value.
    """

    event: Optional[str]
    status: DispatchStatus
    activities: list[GitActivity] = field(default_factory=list)
    result: NormalizerResult = None


class EventDispatcher:
    """
    Maps event names to normalizers.

    Unknown event names are acknowledged without doing anything, so new
    event types enabled on the GitHub side do not cause failed deliveries.
    Exceptions raised by a normalizer propagate to the caller.
    """

    DEFAULT_NORMALIZERS: dict[str, Normalizer] = {
        GitHubEvent.PUSH.value: normalizers.normalize_push,
        GitHubEvent.PULL_REQUEST.value: normalizers.normalize_pull_request,
        GitHubEvent.PULL_REQUEST_REVIEW.value: normalizers.normalize_pull_request_review,
        GitHubEvent.ISSUES.value: normalizers.normalize_issues,
    }

    def __init__(
        self, store: ActivityStore, registry: Optional[dict[str, Normalizer]] = None
    ):
        self.store = store
        self.registry = dict(self.DEFAULT_NORMALIZERS if registry is None else registry)

    @classmethod
    def supported_events(cls) -> list[str]:
        return list(cls.DEFAULT_NORMALIZERS)

    def dispatch(self, event: Optional[str], payload: dict[str, Any]) -> DispatchResult:
        """
        Run the normalizer registered for ``event``.
        :param event: Value of the ``X-GitHub-Event`` header.
        :param payload: Parsed JSON body.
        :return: What happened, including any stored records.
        """
        if event == GitHubEvent.PING.value:
            repository = payload.get("repository")
            name = repository.get("full_name") if isinstance(repository, dict) else None
            logger.info(f"Ping received from {name or 'unknown'}")
            return DispatchResult(event=event, status=DispatchStatus.PING)

        normalizer = self.registry.get(event or "")
        if normalizer is None:
            logger.info(f"Ignoring unsupported event: {event}")
            return DispatchResult(event=event, status=DispatchStatus.UNSUPPORTED)

        result = normalizer(payload, self.store)
        if result is None:
            activities = []
        elif isinstance(result, list):
            activities = result
        else:
            activities = [result]

        return DispatchResult(
            event=event,
            status=DispatchStatus.PROCESSED,
            activities=activities,
            result=result,
        )
