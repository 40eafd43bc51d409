from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Uuid, func, Index, UniqueConstraint
import uuid
from sqlalchemy.orm import relationship
from sportshub.db.session import Base

class Review(Base):
    __tablename__ = "reviews"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    comment = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    event_id = Column(Uuid, ForeignKey("events.id"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="reviews")
    author = relationship("User")

    # One review per user per event
    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_review_event_user'),
        Index('idx_review_event', 'event_id'),
        Index('idx_review_user', 'user_id'),
    )
