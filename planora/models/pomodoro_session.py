from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from planora.database import Base, new_id, utcnow


class PomodoroSession(Base):
    __tablename__ = "pomodoro_sessions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # minutes
    completed = Column(Boolean, nullable=False, default=False)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    started_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
