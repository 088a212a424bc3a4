# app/api/routes/notifications.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core import config
from app.core.security import Caller, get_current_user
from app.db.base import get_db
from app.schemas.notification import NotificationResponse
from app.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/me", response_model=List[NotificationResponse])
def my_notifications(
    take: int = Query(config.NOTIFICATIONS_DEFAULT_TAKE, description="clamped to 1..200"),
    db: Session = Depends(get_db),
    current_user: Caller = Depends(get_current_user),
):
    return notification_service.list_for_receiver(db, current_user.user_id, take)
