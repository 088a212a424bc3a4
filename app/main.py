from fastapi import FastAPI

from app.core import config
from app.core.logging_config import setup_logging
from app.db.base import Base, engine
from app.api.error_handlers import register_error_handlers
from app.api.routes import admin as admin_router
from app.api.routes import availability as availability_router
from app.api.routes import bookings as bookings_router
from app.api.routes import notifications as notifications_router
from app.api.routes import payments as payments_router
from app.api.routes import review as review_router
from app.api.routes import search as search_router

# register every table on Base.metadata
from app.db.models import attendance, availability, booking, notification, payment, provider, review, user  # noqa: F401


app = FastAPI(title="Sitter Booking Core")

register_error_handlers(app)


@app.on_event("startup")
def startup():
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)
    Base.metadata.create_all(bind=engine)


@app.get("/")
def root():
    return {"message": "Sitter Booking API running"}


app.include_router(bookings_router.router)
app.include_router(availability_router.router)
app.include_router(search_router.router)
app.include_router(review_router.router)
app.include_router(payments_router.router)
app.include_router(notifications_router.router)
app.include_router(admin_router.router)
