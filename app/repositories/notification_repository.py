from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import StorageOperationFailedError, StorageUnavailableError
from app.models.notification import Notification
from app.schemas.notification import STATUS_SENT, NotificationCreate, NotificationOut, coalesce_title_message

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive values; CURRENT_TIMESTAMP there is UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_domain(row: Notification) -> NotificationOut:
    title, message = coalesce_title_message(row.title, row.message)
    return NotificationOut(
        id=row.id,
        type=row.type or "",
        title=title,
        message=message,
        status=STATUS_SENT,
        read=bool(row.read),
        created_at=_as_utc(row.created_at),
    )


class NotificationRepository:
    """Owns every query against the notifications table.

    Each method opens its own session and runs a single statement; nothing here
    spans a transaction across calls. Callers only ever see NotificationOut.
    """

    def __init__(self, session_factory: Optional[sessionmaker]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        if self._session_factory is None:
            raise StorageUnavailableError()
        db = self._session_factory()
        try:
            yield db
        except (OperationalError, InterfaceError) as exc:
            raise StorageUnavailableError(f"{action}: database connection not available") from exc
        except SQLAlchemyError as exc:
            raise StorageOperationFailedError(f"{action}: {exc.__class__.__name__}") from exc
        finally:
            db.close()

    def create(self, notification: NotificationCreate, user_id: int) -> NotificationOut:
        title, message = coalesce_title_message(notification.title, notification.message)
        with self._session("insert notification") as db:
            row = Notification(user_id=user_id, title=title, message=message, type=notification.type, read=False)
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.debug("Inserted notification id=%s user_id=%s", row.id, user_id)
            return to_domain(row)

    def find_by_id(self, notification_id: int) -> Optional[NotificationOut]:
        """Return the notification or None when no row matches."""
        with self._session("query notification") as db:
            row = db.get(Notification, notification_id)
            if row is None:
                return None
            return to_domain(row)

    def list_by_user_id(self, user_id: int) -> List[NotificationOut]:
        with self._session("query notifications") as db:
            rows = (
                db.query(Notification)
                .filter(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
                .all()
            )
            return [to_domain(r) for r in rows]

    def mark_as_read(self, notification_id: int) -> bool:
        """Set read=true unconditionally. Returns whether the row exists.

        Already-read rows still match the predicate, so a repeated call reports True.
        """
        with self._session("update notification") as db:
            matched = (
                db.query(Notification)
                .filter(Notification.id == notification_id)
                .update({Notification.read: True}, synchronize_session=False)
            )
            db.commit()
            return matched > 0

    def count_unread_by_user_id(self, user_id: int) -> int:
        with self._session("count unread notifications") as db:
            return (
                db.query(Notification)
                .filter(Notification.user_id == user_id, Notification.read == False)  # noqa: E712
                .count()
            )
