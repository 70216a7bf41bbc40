"""Run a business mutation behind the authorization gate and announce it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from projectpulse.application.ports import EventProducer, PublishResponse, PublishResult
from projectpulse.domain.entities import EventEnvelope, Identity

from .authorization import AuthorizationGate

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


def run_gated_mutation(
    gate: AuthorizationGate,
    identity: Identity,
    *,
    project_id: str,
    capability: str,
    write: Callable[[], ResultT],
    build_events: Callable[[ResultT], Iterable[EventEnvelope]],
    producer: EventProducer,
) -> tuple[ResultT, list[PublishResponse]]:
    """Authorize, perform ``write`` and publish the events describing its result.

    ``write`` must commit before returning. Denied requests raise
    :class:`AuthorizationError` without calling ``write`` or publishing.
    Publish failures are reported in the returned responses and never undo
    or fail the mutation, and neither does an event that cannot be built.
    """

    gate.require(identity, project_id, capability)
    result = write()

    try:
        envelopes = list(build_events(result))
    except ValueError as exc:
        logger.error(
            "Mutation on project %s committed but its events could not be built: %s",
            project_id,
            exc,
        )
        return result, [PublishResponse(result=PublishResult.FAILED, error_message=str(exc))]

    responses: list[PublishResponse] = []
    for envelope in envelopes:
        response = producer.publish(envelope)
        if not response.queued:
            logger.warning(
                "Mutation on project %s committed but event %s was not queued: %s",
                project_id,
                envelope.event_type.value,
                response.error_message,
            )
        responses.append(response)
    return result, responses


__all__ = ["run_gated_mutation"]
