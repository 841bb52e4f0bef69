"""Merged task/exam feeds: the notification list and today's schedule.

Items are rebuilt from the current rows on every call and never written
back. Each source query fails soft: a database error drops that source and
the rest of the feed is still returned.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from planora.config import NOTIFICATION_LIMIT, UPCOMING_WINDOW_DAYS
from planora.models.exam import Exam
from planora.models.task import Task
from planora.schemas.schedule import ScheduleItem
from planora.utils.dates import (
    DAY, days_until, format_date, format_time, local_zone, plural_days, start_of_day, to_utc,
)
from planora.utils.ownership import owned

logger = logging.getLogger(__name__)

DEFAULT_COURSE = "General"


# --- source queries ---

def fetch_upcoming_exams(db: Session, user_id: str, now: datetime, limit: int = NOTIFICATION_LIMIT):
    return (
        owned(db, Exam, user_id)
        .filter(Exam.exam_date >= now)
        .order_by(Exam.exam_date.asc())
        .limit(limit)
        .all()
    )


def fetch_overdue_tasks(db: Session, user_id: str, now: datetime, limit: int = NOTIFICATION_LIMIT):
    return (
        owned(db, Task, user_id)
        .filter(Task.completed.is_(False), Task.due_date.isnot(None), Task.due_date < now)
        .order_by(Task.due_date.asc())
        .limit(limit)
        .all()
    )


def fetch_due_soon_tasks(
    db: Session,
    user_id: str,
    now: datetime,
    limit: int = NOTIFICATION_LIMIT,
    window_days: int = UPCOMING_WINDOW_DAYS,
):
    return (
        owned(db, Task, user_id)
        .filter(
            Task.completed.is_(False),
            Task.due_date >= now,
            Task.due_date <= now + timedelta(days=window_days),
        )
        .order_by(Task.due_date.asc())
        .limit(limit)
        .all()
    )


def _fail_soft(db: Session, source: str, fetch: Callable, *args) -> list:
    try:
        return fetch(db, *args)
    except SQLAlchemyError:
        logger.warning("schedule source %r failed, treating it as empty", source, exc_info=True)
        db.rollback()
        return []


# --- row -> item ---

def exam_notification(exam: Exam, now: datetime, tz: ZoneInfo) -> ScheduleItem:
    return ScheduleItem(
        id=f"exam-{exam.id}",
        title=f"Upcoming Exam: {exam.course}",
        kind="exam",
        message=f"{exam.title} in {plural_days(days_until(exam.exam_date, now))}",
        display_time=format_date(exam.exam_date, tz),
        at=to_utc(exam.exam_date),
        course=exam.course,
    )


def overdue_notification(task: Task, tz: ZoneInfo) -> ScheduleItem:
    return ScheduleItem(
        id=f"overdue-{task.id}",
        title="Overdue Task",
        kind="task",
        message=task.title,
        display_time=format_date(task.due_date, tz),
        at=to_utc(task.due_date),
        course=task.course,
        priority=task.priority,
        completed=task.completed,
    )


def due_soon_notification(task: Task, now: datetime, tz: ZoneInfo) -> ScheduleItem:
    return ScheduleItem(
        id=f"upcoming-{task.id}",
        title="Task Due Soon",
        kind="task",
        message=f"{task.title} due in {plural_days(days_until(task.due_date, now))}",
        display_time=format_date(task.due_date, tz),
        at=to_utc(task.due_date),
        course=task.course or DEFAULT_COURSE,
        priority=task.priority,
        completed=task.completed,
    )


# --- feeds ---

def build_notifications(
    db: Session,
    user_id: Optional[str],
    now: datetime,
    tz: Optional[ZoneInfo] = None,
) -> List[ScheduleItem]:
    """Upcoming exams, then overdue tasks, then tasks due within the window."""
    if user_id is None:
        return []
    now = to_utc(now)
    tz = tz or local_zone()

    exams = _fail_soft(db, "upcoming exams", fetch_upcoming_exams, user_id, now)
    overdue = _fail_soft(db, "overdue tasks", fetch_overdue_tasks, user_id, now)
    due_soon = _fail_soft(db, "due soon tasks", fetch_due_soon_tasks, user_id, now)

    items = [exam_notification(e, now, tz) for e in exams]
    items += [overdue_notification(t, tz) for t in overdue]
    items += [due_soon_notification(t, now, tz) for t in due_soon]
    return items


def fetch_tasks_due_by(db: Session, user_id: str, until: datetime):
    return (
        owned(db, Task, user_id)
        .filter(Task.completed.is_(False), Task.due_date.isnot(None), Task.due_date < until)
        .all()
    )


def fetch_exams_between(db: Session, user_id: str, start: datetime, until: datetime):
    return (
        owned(db, Exam, user_id)
        .filter(Exam.exam_date >= start, Exam.exam_date < until)
        .all()
    )


def build_today_schedule(
    db: Session,
    user_id: Optional[str],
    now: datetime,
    tz: Optional[ZoneInfo] = None,
) -> List[ScheduleItem]:
    """Tasks due today or overdue and exams today or tomorrow, earliest first."""
    if user_id is None:
        return []
    now = to_utc(now)
    tz = tz or local_zone()
    today = start_of_day(now, tz)

    tasks = _fail_soft(db, "today's tasks", fetch_tasks_due_by, user_id, today + DAY)
    exams = _fail_soft(db, "upcoming exams", fetch_exams_between, user_id, now, today + 2 * DAY)

    items = [
        ScheduleItem(
            id=f"task-{t.id}",
            title=t.title,
            kind="task",
            display_time=format_time(t.due_date, tz),
            at=to_utc(t.due_date),
            course=t.course,
            priority=t.priority,
            completed=t.completed,
        )
        for t in tasks
    ]
    items += [
        ScheduleItem(
            id=f"exam-{e.id}",
            title=e.title,
            kind="exam",
            display_time=format_time(e.exam_date, tz),
            at=to_utc(e.exam_date),
            course=e.course,
        )
        for e in exams
    ]
    return sorted(items, key=lambda item: item.at)


class NotificationFeed:
    """Client-held notification list.

    Dismissal only drops the item from this list; nothing is marked read in
    the database, so the next build_notifications brings it back.
    """

    def __init__(self, items: Iterable[ScheduleItem] = ()):
        self.items = list(items)

    def dismiss(self, item_id: str) -> bool:
        before = len(self.items)
        self.items = [i for i in self.items if i.id != item_id]
        return len(self.items) < before

    @property
    def unread_count(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)
