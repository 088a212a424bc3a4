# app/services/availability.py
import logging
from datetime import date, time
from typing import List

from sqlalchemy import and_, exists, or_
from sqlalchemy.orm import Session

from app.core.errors import InvalidIntervalError, NotFoundError, ValidationFailedError
from app.core.security import Caller
from app.db.models.availability import Availability
from app.schemas.availability import AvailabilityCreate
from app.services.provider_service import get_owned_profile
from app.services.unit_of_work import commit

logger = logging.getLogger(__name__)


def availability_window_clause(provider_id, on_date: date, start_time: time, end_time: time):
    """Predicate matching availability rows that fully contain [start_time, end_time] on on_date.

    provider_id may be a plain id or a column, so the search engine can
    correlate the same predicate against every candidate profile.
    A row for the exact date applies; otherwise a weekly row for that weekday.
    Containment is inclusive at both edges.
    """
    return and_(
        Availability.provider_id == provider_id,
        Availability.is_available == True,
        or_(
            Availability.specific_date == on_date,
            and_(
                Availability.specific_date.is_(None),
                Availability.day_of_week == on_date.isoweekday(),
            ),
        ),
        Availability.start_time <= start_time,
        Availability.end_time >= end_time,
    )


def is_available(db: Session, provider_id: int, on_date: date, start_time: time, end_time: time) -> bool:
    clause = availability_window_clause(provider_id, on_date, start_time, end_time)
    return bool(db.query(exists().where(clause)).scalar())


# --------------------------
# Provider-owned availability rows
# --------------------------

def add_availability(db: Session, caller: Caller, payload: AvailabilityCreate) -> Availability:
    profile = get_owned_profile(db, caller)

    if payload.end_time <= payload.start_time:
        raise InvalidIntervalError(payload.start_time, payload.end_time)

    # either weekly or date specific
    if payload.day_of_week is None and payload.specific_date is None:
        raise ValidationFailedError("Provide day_of_week (weekly) or specific_date (one-off)")
    if payload.day_of_week is not None and payload.specific_date is not None:
        raise ValidationFailedError("Provide only one of day_of_week or specific_date")

    avail = Availability(
        provider_id=profile.id,
        day_of_week=payload.day_of_week,
        specific_date=payload.specific_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        is_available=payload.is_available,
    )
    db.add(avail)
    commit(db)
    db.refresh(avail)
    logger.info(f"Availability {avail.id} added", extra={"provider_id": profile.id})
    return avail


def remove_availability(db: Session, caller: Caller, availability_id: int) -> None:
    profile = get_owned_profile(db, caller)

    avail = db.query(Availability).filter(
        Availability.id == availability_id,
        Availability.provider_id == profile.id,
    ).first()
    if not avail:
        raise NotFoundError("Availability", availability_id)

    db.delete(avail)
    commit(db)
    logger.info(f"Availability {availability_id} removed", extra={"provider_id": profile.id})


def list_availability(db: Session, caller: Caller) -> List[Availability]:
    profile = get_owned_profile(db, caller)
    return (
        db.query(Availability)
        .filter(Availability.provider_id == profile.id)
        .order_by(
            Availability.specific_date.is_(None),
            Availability.specific_date.desc(),
            Availability.day_of_week,
            Availability.start_time,
        )
        .all()
    )
