# app/services/provider_service.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, UnauthorizedError
from app.core.security import Caller
from app.db.models.provider import ProviderProfile
from app.services.unit_of_work import commit

logger = logging.getLogger(__name__)


def get_profile_for_owner(db: Session, user_id: int) -> Optional[ProviderProfile]:
    return db.query(ProviderProfile).filter(ProviderProfile.owner_id == user_id).first()


def get_owned_profile(db: Session, caller: Caller) -> ProviderProfile:
    profile = get_profile_for_owner(db, caller.user_id)
    if not profile:
        raise UnauthorizedError("Sitter profile not found for this account")
    return profile


def approve(db: Session, profile_id: int, is_approved: bool) -> ProviderProfile:
    profile = db.query(ProviderProfile).filter(ProviderProfile.id == profile_id).first()
    if not profile:
        raise NotFoundError("Sitter profile", profile_id)

    profile.is_approved = bool(is_approved)
    commit(db)
    db.refresh(profile)
    logger.info(f"Sitter profile {profile_id} approval set to {profile.is_approved}", extra={"provider_id": profile_id})
    return profile
