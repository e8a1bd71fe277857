# app/api/routes/schedule.py
from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional, Union

from app.db.base import get_db
from app.db.models.user import User
from app.schemas.schedule import (
    DeleteWorkingDaysRequest,
    DeleteWorkingDaysResponse,
    PatternGenerateResponse,
    PatternPreviewResponse,
    ScheduleConfigResponse,
    ScheduleConfigUpdate,
    BulkPattern,
    RotationPattern,
    WeeklyPattern,
    TimeSlot,
    WorkingDayInput,
    WorkingDayResponse,
    WorkingDayUpsertResponse,
)
from app.services.schedule_service import ScheduleService
from app.core.security import get_current_user

router = APIRouter(prefix="/specialists/{specialist_id}/schedule", tags=["schedule"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    return ScheduleService(db)


# --------------------------
# config
# --------------------------
@router.get("/config", response_model=ScheduleConfigResponse)
def get_schedule_config(
    specialist_id: int,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    return service.get_config(specialist_id, current_user)


@router.put("/config", response_model=ScheduleConfigResponse)
def update_schedule_config(
    specialist_id: int,
    payload: ScheduleConfigUpdate,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    return service.update_config(specialist_id, payload, current_user)


# --------------------------
# working days
# --------------------------
@router.get("/working-days", response_model=List[WorkingDayResponse])
def list_working_days(
    specialist_id: int,
    start_date: date = Query(..., description="first date, YYYY-MM-DD"),
    end_date: date = Query(..., description="last date (inclusive), YYYY-MM-DD"),
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    return service.list_working_days(specialist_id, start_date, end_date, current_user)


@router.get("/working-days/{day}", response_model=WorkingDayResponse)
def get_working_day(
    specialist_id: int,
    day: date,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    return service.get_working_day(specialist_id, day, current_user)


@router.put("/working-days", response_model=WorkingDayUpsertResponse)
def upsert_working_day(
    specialist_id: int,
    payload: WorkingDayInput,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    working_day_id = service.upsert_working_day(specialist_id, payload, current_user)
    return {"id": working_day_id}


@router.delete("/working-days/{day}", status_code=204)
def delete_working_day(
    specialist_id: int,
    day: date,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    # removing the row is what marks the date as a day off
    service.delete_working_day(specialist_id, day, current_user)


@router.post("/working-days/delete", response_model=DeleteWorkingDaysResponse)
def delete_working_days(
    specialist_id: int,
    payload: DeleteWorkingDaysRequest,
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    count = service.delete_working_days(specialist_id, payload.dates, current_user)
    return {"count": count}


# --------------------------
# patterns
# --------------------------
@router.post("/patterns/preview", response_model=PatternPreviewResponse)
def preview_pattern(
    specialist_id: int,
    pattern: Union[WeeklyPattern, RotationPattern, BulkPattern] = Body(..., discriminator="type"),
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    return service.preview_pattern(specialist_id, pattern, current_user)


@router.post("/patterns/generate", response_model=PatternGenerateResponse)
def generate_from_pattern(
    specialist_id: int,
    pattern: Union[WeeklyPattern, RotationPattern, BulkPattern] = Body(..., discriminator="type"),
    overwrite_existing: bool = Query(False, description="replace hours and breaks of days that already exist"),
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    return service.generate_working_days(specialist_id, pattern, current_user, overwrite_existing=overwrite_existing)


# --------------------------
# timeline
# --------------------------
@router.get("/timeline/{day}", response_model=List[TimeSlot])
def day_timeline(
    specialist_id: int,
    day: date,
    slot_duration: Optional[int] = Query(None, description="minutes; defaults to the schedule config"),
    service: ScheduleService = Depends(get_schedule_service),
    current_user: User = Depends(get_current_user),
):
    return service.day_timeline(specialist_id, day, current_user, slot_duration=slot_duration)
