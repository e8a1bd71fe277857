# app/db/models/appointment.py
from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base import Base

APPOINTMENT_STATUSES = ("pending", "confirmed", "completed", "cancelled", "no_show")

# statuses that hold a slot on the timeline
ACTIVE_STATUSES = ("pending", "confirmed")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'no_show')",
            name="ck_appointments_status",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)

    specialist_id = Column(Integer, ForeignKey("specialists.id", ondelete="CASCADE"), nullable=False, index=True)
    client_name = Column(String, nullable=True)
    service_name = Column(String, nullable=True)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)

    status = Column(String, nullable=False, default="pending")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    specialist = relationship("Specialist", back_populates="appointments")
