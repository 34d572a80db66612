"""
Event model for ticketed events.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from passiify.db.base import BaseModel


class Event(BaseModel):
    """Bookable event run by a host."""
    __tablename__ = "events"

    name = Column(String(200), nullable=False)
    organizer = Column(String(200), nullable=True)
    host_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    location = Column(String(200), nullable=True)
    city = Column(String(100), nullable=True)
    date = Column(DateTime, nullable=True, index=True)

    # Relationships
    host = relationship("User", back_populates="hosted_events")
    bookings = relationship("EventBooking", back_populates="event", cascade="all, delete-orphan")
