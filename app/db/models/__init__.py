# import every model so Base.metadata knows all tables before create_all
from app.db.models.user import User
from app.db.models.specialist import Specialist
from app.db.models.schedule import ScheduleConfig, WorkingDay, WorkingDayBreak
from app.db.models.appointment import Appointment

__all__ = [
    "User",
    "Specialist",
    "ScheduleConfig",
    "WorkingDay",
    "WorkingDayBreak",
    "Appointment",
]
