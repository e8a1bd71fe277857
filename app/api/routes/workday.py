from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional

from app.db.base import get_db
from app.db.models.user import User
from app.schemas.appointment import WorkdayResponse
from app.services.schedule_service import ScheduleService
from app.core.security import get_current_user

router = APIRouter(prefix="/specialists/{specialist_id}/workday", tags=["workday"])


@router.get("", response_model=WorkdayResponse)
def workday_overview(
    specialist_id: int,
    now: Optional[datetime] = Query(
        None,
        description="ISO datetime; an offset is converted to the specialist's timezone, "
        "no offset means local time there. Defaults to the current moment.",
    ),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Today's appointments split into the one in progress, the ones still
    ahead and the ones no longer actionable, with display strings for each.
    """
    return ScheduleService(db).workday_overview(specialist_id, current_user, now=now)
