"""Liveness endpoint reporting the state of the notification pipeline."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from projectpulse.infrastructure.messaging import ConsumerState
from projectpulse.interfaces.api.schemas import HealthRead

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRead)
def health(request: Request, response: Response) -> HealthRead:
    """Report ``degraded`` with HTTP 503 when the consumer has failed."""

    consumer_service = getattr(request.app.state, "consumer_service", None)
    producer = getattr(request.app.state, "producer", None)

    consumer_status = consumer_service.status() if consumer_service else {"state": "disabled"}
    producer_status = producer.metrics.as_dict() if hasattr(producer, "metrics") else {}

    if consumer_status.get("state") == ConsumerState.FAILED.value:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthRead(status="degraded", consumer=consumer_status, producer=producer_status)
    return HealthRead(status="ok", consumer=consumer_status, producer=producer_status)
