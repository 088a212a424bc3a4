# app/db/models/provider.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Table, func
from sqlalchemy.orm import relationship
from app.db.base import Base

provider_skills = Table(
    "provider_skills",
    Base.metadata,
    Column("provider_id", Integer, ForeignKey("provider_profiles.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)


class ProviderProfile(Base):
    """The bookable sitter record, distinct from the account that owns it."""
    __tablename__ = "provider_profiles"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    hourly_rate = Column(Numeric(10, 2), nullable=False)
    experience_years = Column(Integer, nullable=False, default=0)
    location_text = Column(String, nullable=False, default="")

    is_approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", foreign_keys=[owner_id])
    skills = relationship("Skill", secondary=provider_skills, lazy="selectin")
    availabilities = relationship("Availability", back_populates="provider", lazy="selectin")
