from typing import List, Optional

from pydantic import BaseModel
from planora.schemas.exam import ExamOut
from planora.schemas.schedule import ScheduleItem


class DashboardStats(BaseModel):
    active_tasks: int
    completed_today: int
    next_exam: Optional[ExamOut] = None
    focus_minutes: int
    sessions_completed: int


class Dashboard(BaseModel):
    stats: DashboardStats
    schedule: List[ScheduleItem]
