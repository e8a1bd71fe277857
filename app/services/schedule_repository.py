# app/services/schedule_repository.py
"""Schedule repository - database operations for working days, breaks and appointments"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Set

from sqlalchemy import func, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.db.models.appointment import Appointment
from app.db.models.schedule import ScheduleConfig, WorkingDay, WorkingDayBreak
from app.db.models.specialist import Specialist

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _wrap(action: str, exc: SQLAlchemyError) -> PersistenceError:
    logger.error(f"Database error while trying to {action}: {exc}")
    return PersistenceError(f"Failed to {action}")


class ScheduleRepository:
    """Repository for schedule database operations. Never commits; the service owns the transaction."""

    @staticmethod
    def get_owned_specialist(db: Session, specialist_id: int, user_id: int, lock: bool = False) -> Optional[Specialist]:
        query = db.query(Specialist).filter(Specialist.id == specialist_id, Specialist.user_id == user_id)
        if lock:
            # per-specialist lock on PostgreSQL; SQLite renders no FOR UPDATE and serializes writers itself
            query = query.with_for_update()
        try:
            return query.first()
        except SQLAlchemyError as e:
            raise _wrap("load specialist", e)

    # ---------------------------------------------------------------------
    # Working days
    # ---------------------------------------------------------------------

    @staticmethod
    def find_working_days(db: Session, specialist_id: int, start_date: date, end_date: date) -> List[WorkingDay]:
        try:
            return (
                db.query(WorkingDay)
                .filter(
                    WorkingDay.specialist_id == specialist_id,
                    WorkingDay.date >= start_date,
                    WorkingDay.date <= end_date,
                )
                .order_by(WorkingDay.date.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise _wrap("load working days", e)

    @staticmethod
    def get_working_day(db: Session, specialist_id: int, day: date) -> Optional[WorkingDay]:
        try:
            return (
                db.query(WorkingDay)
                .filter(WorkingDay.specialist_id == specialist_id, WorkingDay.date == day)
                .first()
            )
        except SQLAlchemyError as e:
            raise _wrap("load working day", e)

    @staticmethod
    def find_existing_dates(db: Session, specialist_id: int, dates: Iterable[date]) -> Set[date]:
        dates = list(dates)
        if not dates:
            return set()
        try:
            rows = (
                db.query(WorkingDay.date)
                .filter(WorkingDay.specialist_id == specialist_id, WorkingDay.date.in_(dates))
                .all()
            )
        except SQLAlchemyError as e:
            raise _wrap("load existing working days", e)
        return {row.date for row in rows}

    @staticmethod
    def upsert_working_days(db: Session, specialist_id: int, rows: List[dict]) -> List[tuple]:
        """
        Insert or update working days keyed by (specialist_id, date) in one statement.
        rows: dicts with date, start_time, end_time ("HH:MM:SS").
        Returns (id, date) pairs for every row written.
        """
        if not rows:
            return []

        dialect = db.get_bind().dialect.name
        dialect_insert = UPSERT_DIALECTS.get(dialect)
        if dialect_insert is None:
            raise PersistenceError(f"Batch upsert is not supported on {dialect}")

        values = [{**row, "specialist_id": specialist_id} for row in rows]
        stmt = dialect_insert(WorkingDay).values(values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["specialist_id", "date"],
            set_={
                "start_time": stmt.excluded.start_time,
                "end_time": stmt.excluded.end_time,
                "updated_at": func.now(),
            },
        )
        dates = [row["date"] for row in rows]
        try:
            db.execute(stmt)
            written = (
                db.query(WorkingDay.id, WorkingDay.date)
                .filter(WorkingDay.specialist_id == specialist_id, WorkingDay.date.in_(dates))
                .all()
            )
        except SQLAlchemyError as e:
            raise _wrap("save working days", e)
        return [(row.id, row.date) for row in written]

    @staticmethod
    def delete_working_days(db: Session, specialist_id: int, dates: Iterable[date]) -> int:
        """Breaks go with their day through ON DELETE CASCADE."""
        dates = list(dates)
        if not dates:
            return 0
        try:
            return (
                db.query(WorkingDay)
                .filter(WorkingDay.specialist_id == specialist_id, WorkingDay.date.in_(dates))
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise _wrap("delete working days", e)

    # ---------------------------------------------------------------------
    # Breaks
    # ---------------------------------------------------------------------

    @staticmethod
    def delete_breaks(db: Session, working_day_ids: Iterable[int]) -> int:
        working_day_ids = list(working_day_ids)
        if not working_day_ids:
            return 0
        try:
            return (
                db.query(WorkingDayBreak)
                .filter(WorkingDayBreak.working_day_id.in_(working_day_ids))
                .delete(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise _wrap("delete breaks", e)

    @staticmethod
    def insert_breaks(db: Session, rows: List[dict]) -> None:
        """rows: dicts with working_day_id, start_time, end_time."""
        if not rows:
            return
        try:
            db.execute(insert(WorkingDayBreak), rows)
        except SQLAlchemyError as e:
            raise _wrap("insert breaks", e)

    # ---------------------------------------------------------------------
    # Appointments
    # ---------------------------------------------------------------------

    @staticmethod
    def find_appointments(db: Session, specialist_id: int, start_date: date, end_date: date) -> List[Appointment]:
        try:
            return (
                db.query(Appointment)
                .filter(
                    Appointment.specialist_id == specialist_id,
                    Appointment.date >= start_date,
                    Appointment.date <= end_date,
                )
                .order_by(Appointment.date.asc(), Appointment.start_time.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise _wrap("load appointments", e)

    # ---------------------------------------------------------------------
    # Config
    # ---------------------------------------------------------------------

    @staticmethod
    def get_schedule_config(db: Session, specialist_id: int) -> Optional[ScheduleConfig]:
        try:
            return db.query(ScheduleConfig).filter(ScheduleConfig.specialist_id == specialist_id).first()
        except SQLAlchemyError as e:
            raise _wrap("load schedule config", e)

    @staticmethod
    def save_schedule_config(db: Session, specialist_id: int, timezone: str, default_slot_duration: int) -> ScheduleConfig:
        config = ScheduleRepository.get_schedule_config(db, specialist_id)
        if config is None:
            config = ScheduleConfig(specialist_id=specialist_id)
            db.add(config)
        config.timezone = timezone
        config.default_slot_duration = default_slot_duration
        try:
            db.flush()
        except SQLAlchemyError as e:
            raise _wrap("save schedule config", e)
        return config
