from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, validator
from planora.utils.dates import to_utc


class SessionCreate(BaseModel):
    duration: int = Field(..., ge=1, le=180)  # minutes
    task_id: Optional[str] = None


class SessionOut(BaseModel):
    id: str
    user_id: str
    duration: int
    completed: bool
    task_id: Optional[str] = None
    started_at: datetime
    completed_at: Optional[datetime] = None

    @validator("started_at", "completed_at")
    def as_utc(cls, v):
        return to_utc(v)

    class Config:
        from_attributes = True


class DailySummary(BaseModel):
    sessions: List[SessionOut]
    completed_count: int
    total_minutes: int
