from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, validator
from planora.utils.dates import to_utc

Priority = Literal["low", "medium", "high"]


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    course: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = "medium"
    position: int = 0

    @validator("title")
    def title_not_empty(cls, v):
        if not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @validator("due_date")
    def due_date_utc(cls, v):
        return to_utc(v)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    course: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    completed: Optional[bool] = None
    position: Optional[int] = None

    @validator("title")
    def title_not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip() if v is not None else v

    @validator("due_date")
    def due_date_utc(cls, v):
        return to_utc(v)


class TaskOut(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    course: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: str
    completed: bool
    position: int
    created_at: datetime
    updated_at: datetime

    @validator("due_date", "created_at", "updated_at")
    def as_utc(cls, v):
        return to_utc(v)

    class Config:
        from_attributes = True
