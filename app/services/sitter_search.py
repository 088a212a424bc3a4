"""Sitter search: one composed filter + rank query over provider profiles.

Ranking is part of the contract, pages must be reproducible:
avg rating DESC, review count DESC, experience DESC, hourly rate ASC,
then profile id ASC.
"""

import logging
from typing import List, Optional

from sqlalchemy import Float, cast, distinct, exists, func, select
from sqlalchemy.orm import Session

from app.core import config
from app.core.pagination import Page, clamp_paging, offset_for
from app.db.models.provider import ProviderProfile, Skill, provider_skills
from app.db.models.review import Review
from app.db.models.user import User
from app.schemas.search import SitterCard, SitterSearchQuery
from app.services.availability import availability_window_clause

logger = logging.getLogger(__name__)


def normalize_skills(skills) -> List[str]:
    """Trim, drop blanks and de-duplicate case-insensitively, keeping first spelling."""
    seen = set()
    result = []
    for raw in skills or []:
        name = (raw or "").strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        result.append(name)
    return result


def _rating_aggregate(db: Session):
    # only approved, visible reviews count
    return (
        db.query(
            Review.provider_id.label("provider_id"),
            func.avg(cast(Review.rating, Float)).label("avg_rating"),
            func.count(Review.id).label("review_count"),
        )
        .filter(Review.is_approved == True, Review.is_hidden == False)
        .group_by(Review.provider_id)
        .subquery()
    )


def _build_query(db: Session, q: SitterSearchQuery, profile_id: Optional[int] = None):
    ratings = _rating_aggregate(db)
    avg_rating = func.coalesce(ratings.c.avg_rating, 0.0).label("avg_rating")
    review_count = func.coalesce(ratings.c.review_count, 0).label("review_count")

    query = (
        db.query(ProviderProfile, User, avg_rating, review_count)
        .join(User, User.id == ProviderProfile.owner_id)
        .outerjoin(ratings, ratings.c.provider_id == ProviderProfile.id)
    )

    if profile_id is not None:
        query = query.filter(ProviderProfile.id == profile_id)

    if q.only_approved:
        query = query.filter(ProviderProfile.is_approved == True)

    # scalar filters
    if q.location and q.location.strip():
        query = query.filter(ProviderProfile.location_text.ilike(f"%{q.location.strip()}%"))
    if q.min_rate is not None:
        query = query.filter(ProviderProfile.hourly_rate >= q.min_rate)
    if q.max_rate is not None:
        query = query.filter(ProviderProfile.hourly_rate <= q.max_rate)
    if q.min_experience_years is not None:
        query = query.filter(ProviderProfile.experience_years >= q.min_experience_years)

    # every requested skill must be held
    skills = normalize_skills(q.skills)
    if skills:
        matched = (
            select(provider_skills.c.provider_id)
            .join(Skill, Skill.id == provider_skills.c.skill_id)
            .where(func.lower(Skill.name).in_([s.lower() for s in skills]))
            .group_by(provider_skills.c.provider_id)
            .having(func.count(distinct(func.lower(Skill.name))) >= len(skills))
        )
        query = query.filter(ProviderProfile.id.in_(matched))

    if q.on_date is not None and q.start_time is not None and q.end_time is not None:
        window = availability_window_clause(ProviderProfile.id, q.on_date, q.start_time, q.end_time)
        query = query.filter(exists().where(window))

    return query, avg_rating, review_count


def _to_card(profile: ProviderProfile, user: User, avg_rating, review_count) -> SitterCard:
    return SitterCard(
        profile_id=profile.id,
        user_id=user.id,
        full_name=user.full_name,
        email=user.email or "",
        phone=user.phone or "",
        hourly_rate=float(profile.hourly_rate),
        experience_years=profile.experience_years,
        location_text=profile.location_text or "",
        is_approved=bool(profile.is_approved),
        avg_rating=float(avg_rating or 0),
        review_count=int(review_count or 0),
    )


def _run(db: Session, q: SitterSearchQuery, page: int, page_size: int, profile_id: Optional[int] = None):
    query, avg_rating, review_count = _build_query(db, q, profile_id)

    total = query.count()
    rows = (
        query.order_by(
            avg_rating.desc(),
            review_count.desc(),
            ProviderProfile.experience_years.desc(),
            ProviderProfile.hourly_rate.asc(),
            ProviderProfile.id.asc(),
        )
        .offset(offset_for(page, page_size))
        .limit(page_size)
        .all()
    )
    return [_to_card(*row) for row in rows], total


def search(db: Session, q: SitterSearchQuery) -> Page:
    page, page_size = clamp_paging(q.page, q.page_size, config.SEARCH_MAX_PAGE_SIZE)
    items, total = _run(db, q, page, page_size)
    logger.debug(f"Sitter search matched {total} profiles (page {page}, size {page_size})")
    return Page(items, total, page, page_size)


def get_by_id(db: Session, profile_id: int) -> Optional[SitterCard]:
    q = SitterSearchQuery(only_approved=False, page=1, page_size=1)
    items, _ = _run(db, q, 1, 1, profile_id=profile_id)
    return items[0] if items else None
