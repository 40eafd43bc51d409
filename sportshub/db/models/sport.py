from sqlalchemy import Column, Float, String, Text, DateTime, ForeignKey, Uuid, func, Enum, Index
import uuid
from sqlalchemy.orm import relationship
from sportshub.db.session import Base
import enum

class SportLevel(str, enum.Enum):
    all = "all"
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"

class Sport(Base):
    __tablename__ = "sports"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    rules = Column(Text, nullable=False)
    cost = Column(Float, nullable=True)
    level = Column(Enum(SportLevel), default=SportLevel.all, nullable=False)
    event_id = Column(Uuid, ForeignKey("events.id"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="sports")
    creator = relationship("User")

    __table_args__ = (
        Index('idx_sport_event', 'event_id'),
        Index('idx_sport_user', 'user_id'),
    )
