"""Pomodoro session rows, shared by the HTTP router and the timer's store."""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session
from planora.database import utcnow
from planora.models.pomodoro_session import PomodoroSession
from planora.models.task import Task
from planora.utils.ownership import owned


class SessionNotFound(LookupError):
    pass


class SessionAlreadyCompleted(Exception):
    pass


def create_session(
    db: Session,
    user_id: str,
    duration: int,
    task_id: Optional[str] = None,
    started_at: Optional[datetime] = None,
) -> PomodoroSession:
    if task_id is not None and not owned(db, Task, user_id).filter(Task.id == task_id).first():
        raise SessionNotFound(f"task {task_id} not found")
    row = PomodoroSession(
        user_id=user_id,
        duration=duration,
        completed=False,
        task_id=task_id,
        started_at=started_at or utcnow(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def complete_session(
    db: Session,
    user_id: str,
    session_id: str,
    completed_at: Optional[datetime] = None,
) -> PomodoroSession:
    """Mark an open session completed.

    Completing a row twice is rejected with SessionAlreadyCompleted; the
    first completed_at is kept.
    """
    row = owned(db, PomodoroSession, user_id).filter(PomodoroSession.id == session_id).first()
    if not row:
        raise SessionNotFound(session_id)
    if row.completed:
        raise SessionAlreadyCompleted(session_id)
    row.completed = True
    row.completed_at = completed_at or utcnow()
    db.commit()
    db.refresh(row)
    return row


def sessions_since(db: Session, user_id: str, since: datetime) -> List[PomodoroSession]:
    return (
        owned(db, PomodoroSession, user_id)
        .filter(PomodoroSession.started_at >= since)
        .order_by(PomodoroSession.started_at.desc())
        .all()
    )


def completed_minutes(sessions) -> int:
    return sum(s.duration for s in sessions if s.completed)
