"""Tests for the builders that render notification events for mutations."""

from __future__ import annotations

from kafka_doubles import RecordingProducer
from projectpulse.application.use_cases.notifications import (
    notify_comment_added,
    notify_deliverable_phase_changed,
    notify_project_deleted,
    notify_project_members_added,
    notify_project_updated,
    notify_task_assigned,
    notify_task_deleted,
)
from projectpulse.domain.entities import EventType


def test_task_assigned_targets_assignee() -> None:
    producer = RecordingProducer()

    responses = notify_task_assigned(
        producer, task_id="t-1", task_title="Write report", assignee_id="u-5"
    )

    assert [r.queued for r in responses] == [True]
    [envelope] = producer.published
    assert envelope.event_type is EventType.TASK_ASSIGNED
    assert envelope.subject_user_id == "u-5"
    assert envelope.context_id == "t-1"
    assert envelope.message == 'You have been assigned a new task: "Write report"'
    assert envelope.event_id
    assert envelope.occurred_at.tzinfo is not None


def test_unassigned_task_publishes_nothing() -> None:
    producer = RecordingProducer()

    assert notify_task_deleted(producer, task_id="t-1", task_title="x", assignee_id=None) == []
    assert producer.published == []


def test_comment_by_assignee_is_not_echoed() -> None:
    producer = RecordingProducer()

    notify_comment_added(
        producer, task_id="t-1", task_title="Fix", assignee_id="u-1", author_id="u-1"
    )

    assert producer.published == []


def test_members_added_deduplicates_recipients() -> None:
    producer = RecordingProducer()

    notify_project_members_added(
        producer,
        project_id="p-1",
        project_title="Apollo",
        member_ids=["u-1", "u-2", "u-1", None, ""],
    )

    assert [e.subject_user_id for e in producer.published] == ["u-1", "u-2"]
    assert producer.published[0].message == "You have been assigned to the project: Apollo"


def test_project_updated_sends_manager_specific_message() -> None:
    producer = RecordingProducer()

    notify_project_updated(
        producer,
        project_id="p-1",
        project_title="Apollo",
        member_ids=["u-1", "pm-1"],
        manager_id="pm-1",
    )

    messages = {e.subject_user_id: e.message for e in producer.published}
    assert len(producer.published) == 2
    assert messages["u-1"] == "Project 'Apollo' has been updated. Please review the changes."
    assert messages["pm-1"] == (
        "You are managing the project 'Apollo', which has just been updated."
    )


def test_project_deleted_notifies_manager_once() -> None:
    producer = RecordingProducer()

    notify_project_deleted(
        producer,
        project_id="p-1",
        project_title="Apollo",
        member_ids=["u-1", "pm-1"],
        manager_id="pm-1",
    )

    assert sorted(e.subject_user_id for e in producer.published) == ["pm-1", "u-1"]


def test_phase_change_uses_phase_as_context() -> None:
    producer = RecordingProducer()

    notify_deliverable_phase_changed(
        producer,
        phase_id="ph-3",
        phase_title="Design",
        project_title="Apollo",
        member_ids=["u-1"],
    )

    [envelope] = producer.published
    assert envelope.event_type is EventType.DELIVERABLE_PHASE_CHANGED
    assert envelope.context_id == "ph-3"
    assert envelope.message == 'The phase "Design" in project "Apollo" has been updated.'


def test_failed_publish_is_reported_not_raised() -> None:
    producer = RecordingProducer(fail=True)

    responses = notify_task_assigned(
        producer, task_id="t-1", task_title="Write report", assignee_id="u-5"
    )

    assert [r.queued for r in responses] == [False]
