from datetime import datetime
from typing import Optional

from pydantic import BaseModel, validator


class QuickLinkCreate(BaseModel):
    title: str
    url: str
    icon: Optional[str] = None
    position: int = 0

    @validator("url")
    def url_has_scheme(cls, v):
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v


class QuickLinkOut(BaseModel):
    id: str
    user_id: str
    title: str
    url: str
    icon: Optional[str] = None
    position: int
    created_at: datetime

    class Config:
        from_attributes = True
