# app/services/unit_of_work.py
import functools
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import AlreadyExistsError, ConcurrencyConflictError

logger = logging.getLogger(__name__)


def commit(db: Session, duplicate_message: Optional[str] = None) -> None:
    """Commit the session, translating storage-level races into typed errors.

    A version mismatch on a booking row means another request changed it
    between our read and our write. A unique-constraint hit on an owned
    sub-record (payment, review, attendance) means it was created concurrently.
    """
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning("Concurrent booking update detected, rolled back")
        raise ConcurrencyConflictError()
    except IntegrityError:
        db.rollback()
        if duplicate_message is None:
            raise
        logger.warning(f"Duplicate write rejected: {duplicate_message}")
        raise AlreadyExistsError(duplicate_message)


def rollback_on_error(method):
    """Roll back self.db when a mutation fails, so row and advisory locks are
    released right away instead of when the session is closed."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except Exception:
            if self.db.in_transaction():
                self.db.rollback()
            raise

    return wrapper
