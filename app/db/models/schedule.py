# app/db/models/schedule.py
from sqlalchemy import Column, Integer, Date, ForeignKey, DateTime, String, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class ScheduleConfig(Base):
    """
    Per-specialist schedule settings (1:1 with specialist).
    default_slot_duration: minutes, one of 5, 10, 15, 30, 60
    """
    __tablename__ = "schedule_configs"
    __table_args__ = (
        CheckConstraint("default_slot_duration IN (5, 10, 15, 30, 60)"),
    )

    specialist_id = Column(Integer, ForeignKey("specialists.id", ondelete="CASCADE"), primary_key=True)
    timezone = Column(String, nullable=False, default="UTC")
    default_slot_duration = Column(Integer, nullable=False, default=30)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    specialist = relationship("Specialist", back_populates="schedule_config")


class WorkingDay(Base):
    """
    One calendar date's schedule for one specialist.
    No row for a date means the specialist is off that day.
    start_time, end_time: "HH:MM:SS" strings
    """
    __tablename__ = "working_days"
    __table_args__ = (
        UniqueConstraint("specialist_id", "date", name="uq_working_days_specialist_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    specialist_id = Column(Integer, ForeignKey("specialists.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    specialist = relationship("Specialist", back_populates="working_days")
    breaks = relationship(
        "WorkingDayBreak",
        back_populates="working_day",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkingDayBreak.start_time",
        lazy="selectin",
    )


class WorkingDayBreak(Base):
    """
    Break inside a working day. Replaced wholesale whenever the day is saved.
    """
    __tablename__ = "working_day_breaks"

    id = Column(Integer, primary_key=True, index=True)
    working_day_id = Column(Integer, ForeignKey("working_days.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    working_day = relationship("WorkingDay", back_populates="breaks")
