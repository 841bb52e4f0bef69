from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from planora.schemas.pomodoro import SessionCreate, SessionOut, DailySummary
from planora.database import get_db, utcnow
from planora.services import sessions as session_rows
from planora.utils.auth import get_current_user
from planora.utils.dates import start_of_day

router = APIRouter(prefix="/pomodoro", tags=["pomodoro"])


@router.post("/sessions", response_model=SessionOut)
def start_session(body: SessionCreate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    try:
        return session_rows.create_session(db, user, body.duration, task_id=body.task_id)
    except session_rows.SessionNotFound:
        raise HTTPException(status_code=404, detail="Task not found")


@router.post("/sessions/{session_id}/complete", response_model=SessionOut)
def complete_session(session_id: str, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    try:
        return session_rows.complete_session(db, user, session_id)
    except session_rows.SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except session_rows.SessionAlreadyCompleted:
        raise HTTPException(status_code=409, detail="Session already completed")


@router.get("/sessions/today", response_model=DailySummary)
def today_sessions(db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    sessions = session_rows.sessions_since(db, user, start_of_day(utcnow()))
    return DailySummary(
        sessions=[SessionOut.model_validate(s) for s in sessions],
        completed_count=sum(1 for s in sessions if s.completed),
        total_minutes=session_rows.completed_minutes(sessions),
    )
