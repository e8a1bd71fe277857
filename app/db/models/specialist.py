# app/db/models/specialist.py
from sqlalchemy import Column, DateTime, Integer, String, ForeignKey, func
from sqlalchemy.orm import relationship
from app.db.base import Base


class Specialist(Base):
    """
    A service provider with their own schedule and bookings (tenant unit).
    Owned by exactly one user.
    """
    __tablename__ = "specialists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", back_populates="specialists")
    schedule_config = relationship(
        "ScheduleConfig",
        back_populates="specialist",
        uselist=False,
        cascade="all, delete-orphan",
    )
    working_days = relationship(
        "WorkingDay",
        back_populates="specialist",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    appointments = relationship("Appointment", back_populates="specialist", passive_deletes=True)
