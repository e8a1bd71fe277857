# app/services/schedule_service.py
"""Schedule service - working days, pattern generation and day timelines"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import NotFoundError, PersistenceError, ValidationError
from app.db.models.schedule import WorkingDay
from app.db.models.specialist import Specialist
from app.db.models.user import User
from app.schemas.appointment import WorkdayResponse
from app.schemas.schedule import (
    SLOT_DURATIONS,
    GeneratedWorkingDay,
    PatternGenerateResponse,
    PatternPreviewResponse,
    PreviewDay,
    ScheduleConfigResponse,
    ScheduleConfigUpdate,
    SchedulePattern,
    TimeRange,
    TimeSlot,
    WorkingDayInput,
    WorkingDayResponse,
)
from app.services import workday
from app.services.pattern_generator import count_new_and_existing, filter_existing_dates, generate_from_pattern
from app.services.schedule_repository import ScheduleRepository
from app.services.schedule_validation import validate_pattern, validate_working_hours
from app.services.slot_generator import generate_slots_from_working_day
from app.services.time_utils import normalize_stored_time, to_stored_time

logger = logging.getLogger(__name__)


def to_working_day_response(row: WorkingDay) -> WorkingDayResponse:
    return WorkingDayResponse(
        id=row.id,
        specialist_id=row.specialist_id,
        date=row.date,
        start_time=normalize_stored_time(row.start_time),
        end_time=normalize_stored_time(row.end_time),
        breaks=[
            TimeRange(start=normalize_stored_time(br.start_time), end=normalize_stored_time(br.end_time))
            for br in row.breaks
        ],
    )


class ScheduleService:
    """Service layer for schedule business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ScheduleRepository()
        self.settings = get_settings()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _get_owned_specialist(self, specialist_id: int, user: User, lock: bool = False) -> Specialist:
        specialist = self.repo.get_owned_specialist(self.db, specialist_id, user.id, lock=lock)
        if not specialist:
            # same answer for "missing" and "not yours"
            raise NotFoundError("Specialist not found")
        return specialist

    def _commit(self, action: str):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Commit failed while trying to {action}")
            raise PersistenceError(f"Failed to {action}")

    def _replace_breaks(self, working_day_ids: List[int], break_rows: List[dict]):
        """
        Delete every break of the given days, then insert the new ones.

        The insert runs in a savepoint: if it fails the days keep their new
        hours with no breaks at all, and the failure is only logged.
        """
        self.repo.delete_breaks(self.db, working_day_ids)
        if not break_rows:
            return
        try:
            with self.db.begin_nested():
                self.repo.insert_breaks(self.db, break_rows)
        except PersistenceError:
            logger.exception(
                f"Failed to insert {len(break_rows)} breaks for working days {working_day_ids}; "
                "days were saved without breaks"
            )

    # ------------------------------------------------------------------
    # config
    # ------------------------------------------------------------------

    def get_config(self, specialist_id: int, user: User) -> ScheduleConfigResponse:
        self._get_owned_specialist(specialist_id, user)
        return self._config_for(specialist_id)

    def _config_for(self, specialist_id: int) -> ScheduleConfigResponse:
        config = self.repo.get_schedule_config(self.db, specialist_id)
        if config is None:
            return ScheduleConfigResponse(
                specialist_id=specialist_id,
                timezone=self.settings.DEFAULT_TIMEZONE,
                default_slot_duration=self.settings.DEFAULT_SLOT_DURATION,
            )
        return ScheduleConfigResponse.model_validate(config)

    def update_config(self, specialist_id: int, data: ScheduleConfigUpdate, user: User) -> ScheduleConfigResponse:
        self._get_owned_specialist(specialist_id, user)
        try:
            config = self.repo.save_schedule_config(
                self.db, specialist_id, data.timezone, data.default_slot_duration
            )
        except PersistenceError:
            self.db.rollback()
            raise
        self._commit("save schedule config")
        self.db.refresh(config)
        return ScheduleConfigResponse.model_validate(config)

    # ------------------------------------------------------------------
    # single working days
    # ------------------------------------------------------------------

    def list_working_days(self, specialist_id: int, start_date: date, end_date: date, user: User) -> List[WorkingDayResponse]:
        if start_date > end_date:
            raise ValidationError("end date must not be before start date")
        self._get_owned_specialist(specialist_id, user)
        rows = self.repo.find_working_days(self.db, specialist_id, start_date, end_date)
        return [to_working_day_response(row) for row in rows]

    def get_working_day(self, specialist_id: int, day: date, user: User) -> WorkingDayResponse:
        self._get_owned_specialist(specialist_id, user)
        row = self.repo.get_working_day(self.db, specialist_id, day)
        if not row:
            raise NotFoundError("Working day not found")
        return to_working_day_response(row)

    def upsert_working_day(self, specialist_id: int, data: WorkingDayInput, user: User) -> int:
        validate_working_hours(data.start_time, data.end_time, data.breaks)
        self._get_owned_specialist(specialist_id, user, lock=True)

        try:
            written = self.repo.upsert_working_days(
                self.db,
                specialist_id,
                [{
                    "date": data.date,
                    "start_time": to_stored_time(data.start_time),
                    "end_time": to_stored_time(data.end_time),
                }],
            )
            working_day_id = written[0][0]
            self._replace_breaks(
                [working_day_id],
                [
                    {
                        "working_day_id": working_day_id,
                        "start_time": to_stored_time(br.start),
                        "end_time": to_stored_time(br.end),
                    }
                    for br in data.breaks
                ],
            )
        except PersistenceError:
            self.db.rollback()
            raise

        self._commit("save working day")
        logger.info(f"Saved working day {data.date} for specialist {specialist_id}")
        return working_day_id

    def delete_working_day(self, specialist_id: int, day: date, user: User):
        self._get_owned_specialist(specialist_id, user)
        try:
            deleted = self.repo.delete_working_days(self.db, specialist_id, [day])
        except PersistenceError:
            self.db.rollback()
            raise
        if not deleted:
            self.db.rollback()
            raise NotFoundError("Working day not found")
        self._commit("delete working day")
        logger.info(f"Deleted working day {day} for specialist {specialist_id}")

    def delete_working_days(self, specialist_id: int, dates: List[date], user: User) -> int:
        if not dates:
            return 0
        self._get_owned_specialist(specialist_id, user)
        try:
            count = self.repo.delete_working_days(self.db, specialist_id, set(dates))
        except PersistenceError:
            self.db.rollback()
            raise
        self._commit("delete working days")
        logger.info(f"Deleted {count} working days for specialist {specialist_id}")
        return count

    # ------------------------------------------------------------------
    # patterns
    # ------------------------------------------------------------------

    def preview_pattern(self, specialist_id: int, pattern: SchedulePattern, user: User) -> PatternPreviewResponse:
        """Read-only: what generate_from_pattern would write, without writing it."""
        validate_pattern(pattern)
        self._get_owned_specialist(specialist_id, user)

        generated = generate_from_pattern(pattern)
        if not generated:
            return PatternPreviewResponse(total_days=0, new_days=0, existing_days=0, preview=[])

        existing = self.repo.find_existing_dates(self.db, specialist_id, [d.date for d in generated])
        counts = count_new_and_existing(generated, existing)
        sample_size = self.settings.PREVIEW_SAMPLE_SIZE

        return PatternPreviewResponse(
            total_days=len(generated),
            new_days=counts["new"],
            existing_days=counts["existing"],
            preview=[
                PreviewDay(date=d.date, start_time=d.start_time, end_time=d.end_time)
                for d in generated[:sample_size]
            ],
        )

    def generate_working_days(self, specialist_id: int, pattern: SchedulePattern, user: User, overwrite_existing: bool = False) -> PatternGenerateResponse:
        """
        Write the working days a pattern describes.

        Dates that already have a working day are left alone unless
        overwrite_existing is set; then their hours are replaced and their
        breaks swapped for the pattern's.
        """
        validate_pattern(pattern)
        # lock before reading existing days so two generations for one specialist don't interleave
        self._get_owned_specialist(specialist_id, user, lock=True)

        generated = generate_from_pattern(pattern)
        if not generated:
            self.db.rollback()
            return PatternGenerateResponse(created=0, updated=0)

        try:
            existing = self.repo.find_existing_dates(self.db, specialist_id, [d.date for d in generated])
            to_write = generated if overwrite_existing else filter_existing_dates(generated, existing)
            if not to_write:
                self.db.rollback()
                return PatternGenerateResponse(created=0, updated=0)

            written = self.repo.upsert_working_days(
                self.db,
                specialist_id,
                [
                    {
                        "date": d.date,
                        "start_time": to_stored_time(d.start_time),
                        "end_time": to_stored_time(d.end_time),
                    }
                    for d in to_write
                ],
            )
            ids_by_date: Dict[date, int] = {day: working_day_id for working_day_id, day in written}
            self._replace_breaks(list(ids_by_date.values()), self._break_rows(to_write, ids_by_date))
        except PersistenceError:
            self.db.rollback()
            raise

        self._commit("generate working days")

        created = sum(1 for d in to_write if d.date not in existing)
        updated = len(to_write) - created
        logger.info(
            f"Generated {pattern.type} schedule for specialist {specialist_id}: "
            f"{created} created, {updated} updated, {len(generated) - len(to_write)} skipped"
        )
        return PatternGenerateResponse(created=created, updated=updated)

    @staticmethod
    def _break_rows(days: List[GeneratedWorkingDay], ids_by_date: Dict[date, int]) -> List[dict]:
        rows = []
        for day in days:
            working_day_id = ids_by_date.get(day.date)
            if working_day_id is None:
                continue
            for br in day.breaks:
                rows.append({
                    "working_day_id": working_day_id,
                    "start_time": to_stored_time(br.start),
                    "end_time": to_stored_time(br.end),
                })
        return rows

    # ------------------------------------------------------------------
    # read models
    # ------------------------------------------------------------------

    def day_timeline(self, specialist_id: int, day: date, user: User, slot_duration: Optional[int] = None) -> List[TimeSlot]:
        self._get_owned_specialist(specialist_id, user)
        if slot_duration is None:
            slot_duration = self._config_for(specialist_id).default_slot_duration
        if slot_duration not in SLOT_DURATIONS:
            raise ValidationError(f"slot duration must be one of {', '.join(map(str, SLOT_DURATIONS))}")

        row = self.repo.get_working_day(self.db, specialist_id, day)
        if not row:
            # day off
            return []
        appointments = self.repo.find_appointments(self.db, specialist_id, day, day)
        return generate_slots_from_working_day(row, slot_duration, appointments)

    def workday_overview(self, specialist_id: int, user: User, now: Optional[datetime] = None) -> WorkdayResponse:
        """
        now defaults to the current moment. An aware now is read in the
        specialist's timezone; a naive one is taken as wall-clock time there.
        """
        self._get_owned_specialist(specialist_id, user)
        tz = ZoneInfo(self._config_for(specialist_id).timezone)
        if now is None:
            now = datetime.now(tz)
        elif now.tzinfo is not None:
            now = now.astimezone(tz)

        appointments = self.repo.find_appointments(self.db, specialist_id, now.date(), now.date())
        return workday.build_overview(appointments, now)
