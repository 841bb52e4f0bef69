from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session
from planora.models.exam import Exam
from planora.models.task import Task
from planora.schemas.dashboard import Dashboard, DashboardStats
from planora.schemas.exam import ExamOut
from planora.services import sessions as session_rows
from planora.services.schedule import build_today_schedule
from planora.utils.dates import local_zone, start_of_day, to_utc
from planora.utils.ownership import owned


def build_dashboard(db: Session, user_id: str, now: datetime, tz: Optional[ZoneInfo] = None) -> Dashboard:
    now = to_utc(now)
    tz = tz or local_zone()
    today = start_of_day(now, tz)

    active = owned(db, Task, user_id).filter(Task.completed.is_(False)).count()
    # a task's updated_at moves when it is ticked off, so this counts today's completions
    completed_today = (
        owned(db, Task, user_id)
        .filter(Task.completed.is_(True), Task.updated_at >= today)
        .count()
    )
    next_exam = (
        owned(db, Exam, user_id)
        .filter(Exam.exam_date >= now)
        .order_by(Exam.exam_date.asc())
        .first()
    )
    sessions = session_rows.sessions_since(db, user_id, today)

    stats = DashboardStats(
        active_tasks=active,
        completed_today=completed_today,
        next_exam=ExamOut.model_validate(next_exam) if next_exam else None,
        focus_minutes=session_rows.completed_minutes(sessions),
        sessions_completed=sum(1 for s in sessions if s.completed),
    )
    return Dashboard(stats=stats, schedule=build_today_schedule(db, user_id, now, tz))
