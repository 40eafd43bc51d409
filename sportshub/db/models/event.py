from sqlalchemy import Column, Float, String, DateTime, ForeignKey, Uuid, func, Index
import uuid
from sqlalchemy.orm import relationship
from sportshub.db.session import Base

DEFAULT_PHOTO = "no-photo.jpg"


class Event(Base):
    __tablename__ = "events"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), unique=True, nullable=False)
    slug = Column(String(80), nullable=False)
    description = Column(String(500), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)

    # Geocoded point; the raw address is never persisted
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    formatted_address = Column(String(255), nullable=True)
    street = Column(String(255), nullable=True)
    city = Column(String(120), nullable=True)
    state = Column(String(20), nullable=True)
    zipcode = Column(String(20), nullable=True)
    country = Column(String(10), nullable=True)

    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    photo = Column(String(255), nullable=False, default=DEFAULT_PHOTO)
    average_rating = Column(Float, nullable=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    # Owner id for events published by non-admins, NULL otherwise.
    # Unique, so each non-admin can hold at most one event.
    exclusive_owner_id = Column(Uuid, ForeignKey("users.id"), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    owner = relationship("User", foreign_keys=[user_id])
    sports = relationship("Sport", back_populates="event", order_by="Sport.created_at")
    reviews = relationship("Review", back_populates="event")

    __table_args__ = (
        Index('idx_event_owner', 'user_id'),
        Index('idx_event_latitude', 'latitude'),
        Index('idx_event_created_at', 'created_at'),
        Index('idx_event_date', 'date'),
    )

    @property
    def location(self) -> dict:
        """GeoJSON-style point with the normalized address components."""
        return {
            "type": "Point",
            "coordinates": [self.longitude, self.latitude],
            "formatted_address": self.formatted_address,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zipcode": self.zipcode,
            "country": self.country,
        }
