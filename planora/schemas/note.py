from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, validator
from planora.utils.dates import to_utc


def split_tags(raw):
    """Accept either a list or a comma separated string; blanks are dropped.

    An empty result is stored as None rather than an empty list.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.split(",")
    tags = [t.strip() for t in raw if t and t.strip()]
    return tags or None


class NoteCreate(BaseModel):
    title: Optional[str] = None
    content: str
    tags: Optional[Union[List[str], str]] = None
    pinned: bool = False

    @validator("content")
    def content_not_empty(cls, v):
        if not v.strip():
            raise ValueError("content cannot be empty")
        return v

    @validator("title")
    def blank_title_is_none(cls, v):
        return v.strip() or None if v is not None else None

    @validator("tags")
    def normalize_tags(cls, v):
        return split_tags(v)


class NoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[Union[List[str], str]] = None
    pinned: Optional[bool] = None

    @validator("content")
    def content_not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("content cannot be empty")
        return v

    @validator("tags")
    def normalize_tags(cls, v):
        return split_tags(v)


class NoteOut(BaseModel):
    id: str
    user_id: str
    title: Optional[str] = None
    content: str
    tags: Optional[List[str]] = None
    pinned: bool
    created_at: datetime
    updated_at: datetime

    @validator("created_at", "updated_at")
    def as_utc(cls, v):
        return to_utc(v)

    class Config:
        from_attributes = True
