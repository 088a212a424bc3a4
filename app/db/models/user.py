# app/db/models/user.py
from sqlalchemy import Column, Integer, String
from app.db.base import Base


class User(Base):
    """Account row mirrored from the identity provider. Read-only for the core."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    role = Column(String, nullable=False, default="parent", server_default="parent")
