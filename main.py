import asyncio
import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from projectpulse.application.ports import EventProducer
from projectpulse.config import get_settings
from projectpulse.domain.exceptions import ConsumerFatalError
from projectpulse.infrastructure.database import engine, initialize_database
from projectpulse.infrastructure.messaging import (
    KafkaEventProducer,
    NotificationConsumerService,
)
from projectpulse.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


async def _serve_consumer(
    consumer_service: NotificationConsumerService, stop_event: threading.Event
) -> None:
    try:
        await consumer_service.serve(stop_event)
    except ConsumerFatalError as exc:
        # The service records the failure; /health reports it.
        logger.error("Notification consumer stopped with a fatal error: %s", exc)


def create_app(
    *,
    producer: EventProducer | None = None,
    consumer_service: NotificationConsumerService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``producer`` and ``consumer_service`` replace the Kafka-backed defaults;
    when the consumer is disabled in settings and none is given, no
    background loop runs.
    """

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the schema, start the consumer and release everything on shutdown."""

        initialize_database()
        app.state.producer = producer or KafkaEventProducer.from_settings(settings)
        service = consumer_service
        if service is None and settings.notification_consumer_enabled:
            service = NotificationConsumerService.from_settings(settings)
        app.state.consumer_service = service

        stop_event = threading.Event()
        consumer_task = None
        if service is not None:
            consumer_task = asyncio.create_task(_serve_consumer(service, stop_event))

        try:
            yield
        finally:
            stop_event.set()
            if consumer_task is not None:
                await consumer_task
            close = getattr(app.state.producer, "close", None)
            if callable(close):
                close()
            engine.dispose()

    app = FastAPI(title="ProjectPulse notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
