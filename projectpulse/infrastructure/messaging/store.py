"""Connection lifecycle of the notification store used by the consumer."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    IntegrityError,
    SQLAlchemyError,
    StatementError,
)
from sqlalchemy.orm import Session, sessionmaker

from projectpulse.application.ports import NotificationStore
from projectpulse.domain.exceptions import (
    NotificationPersistenceError,
    NotificationRejectedError,
)
from projectpulse.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
)
from projectpulse.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def is_content_rejection(exc: SQLAlchemyError) -> bool:
    """Return ``True`` when the store refused the values rather than failed.

    Constraint and data errors, and statements that could not bind their
    parameters, reproduce on every retry. Everything else (lost connections,
    timeouts, locks) is treated as transient.
    """

    if isinstance(exc, (DataError, IntegrityError)):
        return True
    return isinstance(exc, StatementError) and not isinstance(exc, DBAPIError)


class NotificationStoreProvider:
    """Own an engine dedicated to notifications and hand out per-message sessions.

    The engine is independent of the one serving API requests; it is created
    by :meth:`open` and disposed by :meth:`close`.
    """

    def __init__(self, database_url: str, *, engine: Engine | None = None) -> None:
        self._database_url = database_url
        self._engine = engine
        self._owns_engine = engine is None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_open(self) -> bool:
        return self._session_factory is not None

    def open(self) -> None:
        """Create the engine and schema, raising ``NotificationPersistenceError`` on failure.

        Unparseable URLs and missing database drivers are reported the same
        way as an unreachable server.
        """

        if self._session_factory is not None:
            return
        try:
            if self._engine is None:
                self._engine = build_engine(self._database_url)
            initialize_database(self._engine)
        except (SQLAlchemyError, ImportError) as exc:
            raise NotificationPersistenceError(
                f"Notification store is unreachable: {exc}"
            ) from exc
        self._session_factory = build_session_factory(self._engine)
        logger.info("Notification store opened")

    @contextmanager
    def repository(self) -> Iterator[NotificationStore]:
        """Yield a repository bound to a fresh session, translating store failures.

        Refused content raises :class:`NotificationRejectedError`; any other
        database failure raises :class:`NotificationPersistenceError`.
        """

        if self._session_factory is None:
            raise NotificationPersistenceError("Notification store is not open")
        session = self._session_factory()
        try:
            yield NotificationRepository(session)
        except SQLAlchemyError as exc:
            session.rollback()
            if is_content_rejection(exc):
                raise NotificationRejectedError(str(exc)) from exc
            raise NotificationPersistenceError(str(exc)) from exc
        finally:
            session.close()

    def close(self) -> None:
        self._session_factory = None
        if self._engine is not None and self._owns_engine:
            self._engine.dispose()
            self._engine = None
            logger.info("Notification store connections released")


__all__ = ["NotificationStoreProvider", "is_content_rejection"]
