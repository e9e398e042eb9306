"""Data access for audit events."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from pixiu.models import Event


@contextmanager
def _transaction(session: Session) -> Iterator[None]:
    try:
        yield
        session.commit()
    except Exception:
        session.rollback()
        raise


class AuditDao:
    """Stores, lists and purges audit events."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, obj: Event) -> Event:
        """Store ``obj``, stamping its creation and modification times."""
        now = datetime.now()
        obj.gmt_create = now
        obj.gmt_modified = now
        with _transaction(self._session):
            self._session.add(obj)
        return obj

    def delete(self, timestamp: datetime) -> None:
        """Delete every event created before ``timestamp``."""
        with _transaction(self._session):
            self._session.execute(delete(Event).where(Event.gmt_create < timestamp))

    def list(self, timestamp: datetime) -> list[Event]:
        """Return the events created after ``timestamp``."""
        stmt = select(Event).where(Event.gmt_create > timestamp).order_by(Event.id)
        return list(self._session.scalars(stmt))