"""Error taxonomy of the notification pipeline and its authorization gate."""

from __future__ import annotations


class NotificationPipelineError(Exception):
    """Base class for every error raised by the pipeline."""


class AuthenticationError(NotificationPipelineError):
    """The bearer credential is missing, malformed, expired or lacks claims."""


class AuthorizationError(NotificationPipelineError):
    """A valid identity lacks the capability required for an action."""

    def __init__(self, *, user_id: str, project_id: str, capability: str) -> None:
        super().__init__(
            f"User '{user_id}' lacks capability '{capability}' on project '{project_id}'"
        )
        self.user_id = user_id
        self.project_id = project_id
        self.capability = capability


class PublishError(NotificationPipelineError):
    """The broker client refused or could not enqueue an event."""


class EventDeserializationError(NotificationPipelineError):
    """A consumed payload is not a valid event envelope."""


class NotificationPersistenceError(NotificationPipelineError):
    """The notification store could not record a notification."""


class NotificationRejectedError(NotificationPipelineError):
    """The notification store refused the content of a notification."""


class ConsumerFatalError(NotificationPipelineError):
    """The consumer service cannot start or keep its broker session."""


__all__ = [
    "NotificationPipelineError",
    "AuthenticationError",
    "AuthorizationError",
    "PublishError",
    "EventDeserializationError",
    "NotificationPersistenceError",
    "NotificationRejectedError",
    "ConsumerFatalError",
]
