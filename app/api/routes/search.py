# app/api/routes/search.py
from datetime import date, time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core import config
from app.core.errors import NotFoundError
from app.db.base import get_db
from app.schemas.search import SitterCard, SitterSearchQuery, SitterSearchResponse
from app.services import sitter_search

router = APIRouter(prefix="/sitters", tags=["sitters"])


@router.get("/search", response_model=SitterSearchResponse)
def search_sitters(
    location: Optional[str] = Query(None, description="Case-insensitive substring of the sitter location"),
    min_rate: Optional[float] = Query(None, ge=0.0),
    max_rate: Optional[float] = Query(None, ge=0.0),
    min_experience_years: Optional[int] = Query(None, ge=0),
    skills: List[str] = Query(default=[], description="Every listed skill is required"),
    on_date: Optional[date] = Query(None, description="YYYY-MM-DD, used with start_time and end_time"),
    start_time: Optional[time] = Query(None),
    end_time: Optional[time] = Query(None),
    page: int = Query(1),
    page_size: int = Query(config.SEARCH_DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """
    Search approved sitters.
    - all filters combine with AND
    - `on_date` + `start_time` + `end_time` keep only sitters with a window containing that slot
    - ordered by rating, review count, experience, then lowest rate
    """
    q = SitterSearchQuery(
        only_approved=True,
        location=location,
        min_rate=min_rate,
        max_rate=max_rate,
        min_experience_years=min_experience_years,
        skills=skills,
        on_date=on_date,
        start_time=start_time,
        end_time=end_time,
        page=page,
        page_size=page_size,
    )
    result = sitter_search.search(db, q)
    return SitterSearchResponse(**result._asdict())


@router.get("/{profile_id}", response_model=SitterCard)
def get_sitter(profile_id: int, db: Session = Depends(get_db)):
    card = sitter_search.get_by_id(db, profile_id)
    if card is None:
        raise NotFoundError("Sitter", profile_id)
    return card
