# app/schemas/appointment.py
from pydantic import BaseModel, Field, field_validator
import datetime as dt
from typing import List, Optional

from app.services.time_utils import normalize_stored_time


class AppointmentResponse(BaseModel):
    id: int
    specialist_id: int
    client_name: Optional[str] = None
    service_name: Optional[str] = None
    date: dt.date
    start_time: str
    end_time: str
    status: str

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def drop_seconds(cls, value):
        return normalize_stored_time(value)

    class Config:
        from_attributes = True


class WorkdayAppointment(AppointmentResponse):
    time_range: str = Field("", description='e.g. "09:00 – 10:30"')
    time_remaining: Optional[str] = Field(None, description='Set on the current appointment, e.g. "15 min left"')
    time_until: Optional[str] = Field(None, description='Set on upcoming appointments, e.g. "in 1h 30m"')
    break_before: Optional[str] = Field(
        None, description='Free time since the previous appointment ends, e.g. "30min break"'
    )


class WorkdayResponse(BaseModel):
    current: Optional[WorkdayAppointment] = None
    upcoming: List[WorkdayAppointment]
    completed: List[WorkdayAppointment]
