from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text
from planora.database import Base, new_id, utcnow


class Exam(Base):
    __tablename__ = "exams"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    course = Column(String, nullable=False)
    title = Column(String, nullable=False)
    exam_date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String, nullable=True)
    weight = Column(Float, nullable=True)  # percent of the final grade
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
