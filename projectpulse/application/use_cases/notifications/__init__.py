"""Public helpers for emitting and reading user notifications."""

from .events import (
    build_envelope,
    notify_comment_added,
    notify_deliverable_phase_changed,
    notify_permissions_changed,
    notify_project_deleted,
    notify_project_manager_assigned,
    notify_project_members_added,
    notify_project_status_changed,
    notify_project_updated,
    notify_subtask_assigned,
    notify_task_assigned,
    notify_task_deleted,
    notify_task_status_changed,
    notify_task_updated,
    permissions_changed_envelope,
)
from .list_notifications import count_unread_notifications, list_notifications
from .mark_notification_read import mark_notification_read

__all__ = [
    "build_envelope",
    "count_unread_notifications",
    "list_notifications",
    "mark_notification_read",
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
