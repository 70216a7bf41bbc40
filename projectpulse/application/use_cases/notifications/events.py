"""Builders that render and publish notification events for business mutations.

Every helper is meant to be called after the mutation it describes has been
committed. Publishing is best-effort: the returned responses report failures
but nothing here raises because of the broker.
"""

from __future__ import annotations

from collections.abc import Iterable

from projectpulse.application.ports import EventProducer, PublishResponse
from projectpulse.domain.entities import EventEnvelope, EventType
from projectpulse.utils import now_in_app_timezone


def build_envelope(
    *,
    event_type: EventType,
    user_id: str,
    context_id: str,
    message: str,
) -> EventEnvelope:
    """Return an envelope stamped with the current time and a fresh event id."""

    return EventEnvelope(
        event_type=event_type,
        subject_user_id=user_id,
        context_id=context_id,
        message=message,
        occurred_at=now_in_app_timezone(),
    )


def _publish(
    producer: EventProducer,
    *,
    event_type: EventType,
    user_id: str | None,
    context_id: str,
    message: str,
) -> list[PublishResponse]:
    if not user_id:
        return []
    envelope = build_envelope(
        event_type=event_type, user_id=user_id, context_id=context_id, message=message
    )
    return [producer.publish(envelope)]


def _unique_recipients(candidates: Iterable[str | None]) -> list[str]:
    unique: list[str] = []
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip() and candidate not in unique:
            unique.append(candidate)
    return unique


def notify_task_assigned(
    producer: EventProducer, *, task_id: str, task_title: str, assignee_id: str | None
) -> list[PublishResponse]:
    """Tell the assignee a task is now theirs."""

    return _publish(
        producer,
        event_type=EventType.TASK_ASSIGNED,
        user_id=assignee_id,
        context_id=task_id,
        message=f'You have been assigned a new task: "{task_title}"',
    )


def notify_task_updated(
    producer: EventProducer, *, task_id: str, task_title: str, assignee_id: str | None
) -> list[PublishResponse]:
    return _publish(
        producer,
        event_type=EventType.TASK_UPDATED,
        user_id=assignee_id,
        context_id=task_id,
        message=f'Task "{task_title}" assigned to you has been updated.',
    )


def notify_task_deleted(
    producer: EventProducer, *, task_id: str, task_title: str, assignee_id: str | None
) -> list[PublishResponse]:
    return _publish(
        producer,
        event_type=EventType.TASK_DELETED,
        user_id=assignee_id,
        context_id=task_id,
        message=f'Task "{task_title}" assigned to you has been deleted.',
    )


def notify_task_status_changed(
    producer: EventProducer,
    *,
    task_id: str,
    task_title: str,
    status: str,
    assignee_id: str | None,
) -> list[PublishResponse]:
    return _publish(
        producer,
        event_type=EventType.TASK_STATUS_CHANGED,
        user_id=assignee_id,
        context_id=task_id,
        message=f'Task "{task_title}" assigned to you is now {status}.',
    )


def notify_subtask_assigned(
    producer: EventProducer,
    *,
    subtask_id: str,
    description: str,
    assignee_id: str | None,
) -> list[PublishResponse]:
    return _publish(
        producer,
        event_type=EventType.SUBTASK_ASSIGNED,
        user_id=assignee_id,
        context_id=subtask_id,
        message=f'You have been assigned a new subtask: "{description}"',
    )


def notify_comment_added(
    producer: EventProducer,
    *,
    task_id: str,
    task_title: str,
    assignee_id: str | None,
    author_id: str | None = None,
) -> list[PublishResponse]:
    """Tell the task assignee about a new comment unless they wrote it."""

    if assignee_id and assignee_id == author_id:
        return []
    return _publish(
        producer,
        event_type=EventType.COMMENT_ADDED,
        user_id=assignee_id,
        context_id=task_id,
        message=f'A new comment was added to your task: "{task_title}"',
    )


def notify_project_members_added(
    producer: EventProducer,
    *,
    project_id: str,
    project_title: str,
    member_ids: Iterable[str | None],
) -> list[PublishResponse]:
    responses: list[PublishResponse] = []
    for member_id in _unique_recipients(member_ids):
        responses += _publish(
            producer,
            event_type=EventType.PROJECT_MEMBER_ADDED,
            user_id=member_id,
            context_id=project_id,
            message=f"You have been assigned to the project: {project_title}",
        )
    return responses


def notify_project_manager_assigned(
    producer: EventProducer,
    *,
    project_id: str,
    project_title: str,
    manager_id: str | None,
) -> list[PublishResponse]:
    return _publish(
        producer,
        event_type=EventType.PROJECT_MANAGER_ASSIGNED,
        user_id=manager_id,
        context_id=project_id,
        message=f"You are assigned as the manager for the project: {project_title}",
    )


def notify_project_updated(
    producer: EventProducer,
    *,
    project_id: str,
    project_title: str,
    member_ids: Iterable[str | None],
    manager_id: str | None = None,
) -> list[PublishResponse]:
    """Notify members, then the manager with a manager-specific message."""

    responses: list[PublishResponse] = []
    for member_id in _unique_recipients(member_ids):
        if member_id == manager_id:
            continue
        responses += _publish(
            producer,
            event_type=EventType.PROJECT_UPDATED,
            user_id=member_id,
            context_id=project_id,
            message=(
                f"Project '{project_title}' has been updated. Please review the changes."
            ),
        )
    responses += _publish(
        producer,
        event_type=EventType.PROJECT_UPDATED,
        user_id=manager_id,
        context_id=project_id,
        message=(
            f"You are managing the project '{project_title}', which has just been updated."
        ),
    )
    return responses


def notify_project_status_changed(
    producer: EventProducer,
    *,
    project_id: str,
    project_title: str,
    status: str,
    recipient_ids: Iterable[str | None],
) -> list[PublishResponse]:
    responses: list[PublishResponse] = []
    for recipient_id in _unique_recipients(recipient_ids):
        responses += _publish(
            producer,
            event_type=EventType.PROJECT_STATUS_CHANGED,
            user_id=recipient_id,
            context_id=project_id,
            message=f"Project '{project_title}' status changed to {status}.",
        )
    return responses


def notify_project_deleted(
    producer: EventProducer,
    *,
    project_id: str,
    project_title: str,
    member_ids: Iterable[str | None],
    manager_id: str | None = None,
) -> list[PublishResponse]:
    """Notify every member once and the manager only if not already a member."""

    members = _unique_recipients(member_ids)
    responses: list[PublishResponse] = []
    for member_id in members:
        responses += _publish(
            producer,
            event_type=EventType.PROJECT_DELETED,
            user_id=member_id,
            context_id=project_id,
            message=f"The project '{project_title}' you were part of has been deleted.",
        )
    if manager_id and manager_id not in members:
        responses += _publish(
            producer,
            event_type=EventType.PROJECT_DELETED,
            user_id=manager_id,
            context_id=project_id,
            message=f"The project '{project_title}' you were managing has been deleted.",
        )
    return responses


def notify_deliverable_phase_changed(
    producer: EventProducer,
    *,
    phase_id: str,
    phase_title: str,
    project_title: str,
    member_ids: Iterable[str | None],
    manager_id: str | None = None,
) -> list[PublishResponse]:
    responses: list[PublishResponse] = []
    for member_id in _unique_recipients(member_ids):
        if member_id == manager_id:
            continue
        responses += _publish(
            producer,
            event_type=EventType.DELIVERABLE_PHASE_CHANGED,
            user_id=member_id,
            context_id=phase_id,
            message=(
                f'The phase "{phase_title}" in project "{project_title}" has been updated.'
            ),
        )
    responses += _publish(
        producer,
        event_type=EventType.DELIVERABLE_PHASE_CHANGED,
        user_id=manager_id,
        context_id=phase_id,
        message=f'A phase "{phase_title}" in your project "{project_title}" has been updated.',
    )
    return responses


def permissions_changed_envelope(
    *, project_id: str, user_id: str, capabilities: Iterable[str]
) -> EventEnvelope:
    names = ", ".join(sorted(capabilities)) or "none"
    return build_envelope(
        event_type=EventType.PROJECT_PERMISSIONS_CHANGED,
        user_id=user_id,
        context_id=project_id,
        message=f"Your permissions on this project are now: {names}.",
    )


def notify_permissions_changed(
    producer: EventProducer,
    *,
    project_id: str,
    user_id: str,
    capabilities: Iterable[str],
) -> list[PublishResponse]:
    return [
        producer.publish(
            permissions_changed_envelope(
                project_id=project_id, user_id=user_id, capabilities=capabilities
            )
        )
    ]


__all__ = [
    "build_envelope",
    "notify_comment_added",
    "notify_deliverable_phase_changed",
    "notify_permissions_changed",
    "notify_project_deleted",
    "notify_project_manager_assigned",
    "notify_project_members_added",
    "notify_project_status_changed",
    "notify_project_updated",
    "notify_subtask_assigned",
    "notify_task_assigned",
    "notify_task_deleted",
    "notify_task_status_changed",
    "notify_task_updated",
    "permissions_changed_envelope",
]
