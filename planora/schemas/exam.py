from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, validator
from planora.utils.dates import to_utc


class ExamCreate(BaseModel):
    course: str
    title: str
    exam_date: datetime
    location: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None

    @validator("course", "title")
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @validator("exam_date")
    def exam_date_utc(cls, v):
        return to_utc(v)


class ExamUpdate(BaseModel):
    course: Optional[str] = None
    title: Optional[str] = None
    exam_date: Optional[datetime] = None
    location: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None

    @validator("exam_date")
    def exam_date_utc(cls, v):
        return to_utc(v)


class ExamOut(BaseModel):
    id: str
    user_id: str
    course: str
    title: str
    exam_date: datetime
    location: Optional[str] = None
    weight: Optional[float] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @validator("exam_date", "created_at", "updated_at")
    def as_utc(cls, v):
        return to_utc(v)

    class Config:
        from_attributes = True
