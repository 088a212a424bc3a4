# app/db/models/availability.py
from sqlalchemy import Boolean, CheckConstraint, Column, Date, ForeignKey, Integer, Time
from sqlalchemy.orm import relationship
from app.db.base import Base


class Availability(Base):
    """
    A window during which a provider can be booked.
    Either recurring (day_of_week 1=Mon .. 7=Sun) or one-off (specific_date),
    never both and never neither.
    """
    __tablename__ = "availabilities"
    __table_args__ = (
        CheckConstraint("day_of_week IS NULL OR day_of_week BETWEEN 1 AND 7", name="ck_availability_weekday"),
        CheckConstraint(
            "(day_of_week IS NULL AND specific_date IS NOT NULL) OR "
            "(day_of_week IS NOT NULL AND specific_date IS NULL)",
            name="ck_availability_day_xor_date",
        ),
        CheckConstraint("start_time < end_time", name="ck_availability_interval"),
    )

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("provider_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=True)
    specific_date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    provider = relationship("ProviderProfile", back_populates="availabilities")
