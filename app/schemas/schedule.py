# app/schemas/schedule.py
from pydantic import BaseModel, Field, conint, field_validator
from typing import Annotated, List, Literal, Optional, Union
import datetime as dt
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"

SLOT_DURATIONS = (5, 10, 15, 30, 60)

SlotDuration = Literal[5, 10, 15, 30, 60]
TimeOfDay = Annotated[str, Field(pattern=TIME_PATTERN, description="HH:MM")]


class TimeRange(BaseModel):
    start: TimeOfDay
    end: TimeOfDay


class WorkingHours(BaseModel):
    """Hours template copied onto every day a pattern generates."""
    start: TimeOfDay
    end: TimeOfDay
    breaks: List[TimeRange] = Field(default_factory=list)


# --- PATTERNS ---
class WeeklyPattern(BaseModel):
    type: Literal["weekly"] = "weekly"
    start_date: dt.date
    end_date: dt.date
    days_of_week: List[conint(ge=0, le=6)] = Field(..., description="0=Sun, 1=Mon, …, 6=Sat")
    working_hours: WorkingHours


class RotationPattern(BaseModel):
    type: Literal["rotation"] = "rotation"
    start_date: dt.date
    end_date: dt.date
    days_on: int = Field(..., description="Consecutive working days at the start of each cycle (1-30)")
    days_off: int = Field(..., description="Days off that follow them (1-30)")
    working_hours: WorkingHours


class BulkPattern(BaseModel):
    type: Literal["bulk"] = "bulk"
    start_date: dt.date
    end_date: dt.date
    dates: List[dt.date]
    working_hours: WorkingHours


SchedulePattern = Annotated[
    Union[WeeklyPattern, RotationPattern, BulkPattern],
    Field(discriminator="type"),
]


class GeneratedWorkingDay(BaseModel):
    date: dt.date
    start_time: str
    end_time: str
    breaks: List[TimeRange] = Field(default_factory=list)


class PreviewDay(BaseModel):
    date: dt.date
    start_time: str
    end_time: str


class PatternPreviewResponse(BaseModel):
    total_days: int
    new_days: int
    existing_days: int
    preview: List[PreviewDay]


class PatternGenerateResponse(BaseModel):
    created: int
    updated: int


# --- WORKING DAYS ---
class WorkingDayInput(BaseModel):
    date: dt.date
    start_time: TimeOfDay
    end_time: TimeOfDay
    breaks: List[TimeRange] = Field(default_factory=list)


class WorkingDayResponse(BaseModel):
    id: int
    specialist_id: int
    date: dt.date
    start_time: str
    end_time: str
    breaks: List[TimeRange]


class WorkingDayUpsertResponse(BaseModel):
    id: int


class DeleteWorkingDaysRequest(BaseModel):
    dates: List[dt.date]


class DeleteWorkingDaysResponse(BaseModel):
    count: int


# --- SLOTS ---
class TimeSlot(BaseModel):
    start: str
    end: str
    available: bool
    blocked_reason: Optional[Literal["break", "booked"]] = None


# --- CONFIG ---
class ScheduleConfigUpdate(BaseModel):
    timezone: str = Field(..., min_length=1)
    default_slot_duration: SlotDuration

    @field_validator("timezone")
    @classmethod
    def timezone_must_exist(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{value}'")
        return value


class ScheduleConfigResponse(BaseModel):
    specialist_id: int
    timezone: str
    default_slot_duration: int

    class Config:
        from_attributes = True
