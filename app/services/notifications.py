"""Notification requests raised by booking operations.

Delivery is someone else's job. The booking core only asks for a message to
be sent, after its own transaction has committed, and never lets a failure
here reach the caller. Rows stored by the in-app sink double as the
user's inbox.
"""

import logging
from datetime import datetime
from typing import List, Protocol

from sqlalchemy.orm import Session

from app.core import config
from app.core.pagination import clamp
from app.db.base import SessionLocal
from app.db.models.notification import Notification

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def notify(self, receiver_id: int, title: str, message: str) -> None:
        ...


class InAppNotifier:
    """Stores an in-app notification row using its own session."""

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    def notify(self, receiver_id: int, title: str, message: str) -> None:
        with self._session_factory() as db:
            db.add(Notification(
                receiver_user_id=receiver_id,
                channel="in_app",
                title=title,
                message=message,
                is_sent=True,
                sent_at=datetime.utcnow(),
            ))
            db.commit()


def get_notifier() -> NotificationSink:
    return InAppNotifier()


def send_safely(sink: NotificationSink, receiver_id: int, title: str, message: str) -> None:
    try:
        sink.notify(receiver_id, title, message)
    except Exception:
        logger.warning(
            f"Notification '{title}' to user {receiver_id} failed",
            exc_info=True,
            extra={"user_id": receiver_id},
        )


def list_for_receiver(db: Session, user_id: int, take: int = config.NOTIFICATIONS_DEFAULT_TAKE) -> List[Notification]:
    """The caller's in-app inbox, newest first."""
    size = clamp(take, 1, config.NOTIFICATIONS_MAX_TAKE)
    return (
        db.query(Notification)
        .filter(Notification.receiver_user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(size)
        .all()
    )
