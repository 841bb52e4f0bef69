from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from planora.database import get_db, utcnow
from planora.models.exam import Exam
from planora.models.note import Note
from planora.models.pomodoro_session import PomodoroSession
from planora.models.quick_link import QuickLink
from planora.models.task import Task
from planora.schemas.exam import ExamOut
from planora.schemas.note import NoteOut
from planora.schemas.pomodoro import SessionOut
from planora.schemas.quick_link import QuickLinkOut
from planora.schemas.task import TaskOut
from planora.utils.auth import get_current_user
from planora.utils.ownership import owned

router = APIRouter(tags=["export"])

TABLES = (
    ("tasks", Task, TaskOut),
    ("exams", Exam, ExamOut),
    ("notes", Note, NoteOut),
    ("pomodoro_sessions", PomodoroSession, SessionOut),
    ("quick_links", QuickLink, QuickLinkOut),
)


@router.get("/export")
def export_data(db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    """Everything the caller owns, one list per table."""
    data = {"exported_at": utcnow()}
    for name, model, schema in TABLES:
        data[name] = [schema.model_validate(row) for row in owned(db, model, user).all()]
    return data
