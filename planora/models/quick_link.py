from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from planora.database import Base, new_id, utcnow


class QuickLink(Base):
    __tablename__ = "quick_links"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
