"""Shared fixtures: a fresh in-memory SQLite database per test, seed factories,
a notifier that records instead of delivering, and a TestClient wired to both.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, time
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import Caller
from app.db.base import Base, get_db
from app.db.models.availability import Availability
from app.db.models.provider import ProviderProfile, Skill
from app.db.models.review import Review
from app.db.models.user import User
from app.main import app
from app.services.notifications import get_notifier

# 2026-06-15 is a Monday (ISO weekday 1)
MONDAY = date(2026, 6, 15)


class RecordingNotifier:
    def __init__(self):
        self.sent = []
        self.fail = False

    def notify(self, receiver_id, title, message):
        if self.fail:
            raise RuntimeError("notification backend down")
        self.sent.append((receiver_id, title, message))

    def titles_for(self, receiver_id):
        return [title for rid, title, _ in self.sent if rid == receiver_id]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


# --------------------------
# seed factories
# --------------------------

@pytest.fixture
def make_user(db):
    seq = count(1)

    def _make(role="parent", full_name=None, email=None):
        n = next(seq)
        user = User(
            email=email or f"{role}{n}@example.com",
            full_name=full_name or f"{role.title()} {n}",
            phone=f"+88017000000{n:02d}",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_sitter(db, make_user):
    def _make(hourly_rate="20.00", experience_years=3, location_text="Dhanmondi, Dhaka",
              is_approved=True, skills=(), full_name=None):
        owner = make_user(role="provider", full_name=full_name)
        profile = ProviderProfile(
            owner_id=owner.id,
            hourly_rate=Decimal(hourly_rate),
            experience_years=experience_years,
            location_text=location_text,
            is_approved=is_approved,
        )
        for name in skills:
            skill = db.query(Skill).filter(Skill.name == name).first() or Skill(name=name)
            profile.skills.append(skill)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def add_window(db):
    def _add(profile, start=time(8, 0), end=time(18, 0), day_of_week=None, specific_date=None,
             is_available=True):
        if day_of_week is None and specific_date is None:
            day_of_week = MONDAY.isoweekday()
        window = Availability(
            provider_id=profile.id,
            day_of_week=day_of_week,
            specific_date=specific_date,
            start_time=start,
            end_time=end,
            is_available=is_available,
        )
        db.add(window)
        db.commit()
        db.refresh(window)
        return window

    return _add


@pytest.fixture
def add_review(db, make_user):
    """Insert a review row directly; ratings only need a booking id to be unique."""
    seq = count(10_000)

    def _add(profile, rating, is_approved=True, is_hidden=False):
        parent = make_user()
        review = Review(
            booking_id=next(seq),
            parent_id=parent.id,
            provider_id=profile.id,
            rating=rating,
            comment="",
            is_approved=is_approved,
            is_hidden=is_hidden,
        )
        db.add(review)
        db.commit()
        return review

    return _add


def as_parent(user):
    return Caller(user_id=user.id, role="parent")


def as_provider(profile):
    return Caller(user_id=profile.owner_id, role="provider")


def as_admin(user):
    return Caller(user_id=user.id, role="admin")


def headers_for(caller):
    return {"X-User-Sub": str(caller.user_id), "X-User-Role": caller.role}


# --------------------------
# API client
# --------------------------

@pytest.fixture
def client(session_factory, notifier):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield TestClient(app)

    app.dependency_overrides.clear()
