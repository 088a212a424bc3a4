# app/core/config.py
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sitter_booking.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")  # json | text

# Sitter search paging
SEARCH_DEFAULT_PAGE_SIZE = int(os.getenv("SEARCH_DEFAULT_PAGE_SIZE", "20"))
SEARCH_MAX_PAGE_SIZE = int(os.getenv("SEARCH_MAX_PAGE_SIZE", "100"))

# History note used when a parent reschedules without giving one
RESCHEDULE_DEFAULT_NOTE = os.getenv("RESCHEDULE_DEFAULT_NOTE", "Rescheduled")

# In-app notification inbox
NOTIFICATIONS_DEFAULT_TAKE = int(os.getenv("NOTIFICATIONS_DEFAULT_TAKE", "50"))
NOTIFICATIONS_MAX_TAKE = int(os.getenv("NOTIFICATIONS_MAX_TAKE", "200"))
