from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from planora.schemas.dashboard import Dashboard
from planora.schemas.schedule import ScheduleItem
from planora.database import get_db, utcnow
from planora.services.dashboard import build_dashboard
from planora.services.schedule import build_notifications
from planora.utils.auth import get_current_user, get_optional_user

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=Dashboard)
def dashboard(db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    return build_dashboard(db, user, utcnow())


@router.get("/notifications", response_model=List[ScheduleItem])
def notifications(db: Session = Depends(get_db), user: Optional[str] = Depends(get_optional_user)):
    # anonymous callers get an empty feed, not an error
    return build_notifications(db, user, utcnow())
