from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class ScheduleItem(BaseModel):
    """One row of the merged task/exam feed; rebuilt on every request."""

    id: str
    title: str
    kind: Literal["task", "exam"]
    message: str = ""
    display_time: str
    at: datetime
    course: Optional[str] = None
    priority: Optional[str] = None
    completed: Optional[bool] = None
