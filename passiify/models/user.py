"""
User model for end users and partners (gym owners / event hosts).
"""
from sqlalchemy import Column, String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from passiify.db.base import BaseModel
import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    USER = "user"
    PARTNER = "partner"


class User(BaseModel):
    """User model. Partners own gyms or host events."""
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), default=UserRole.USER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    gyms = relationship("Gym", back_populates="owner")
    hosted_events = relationship("Event", back_populates="host")
    bookings = relationship("Booking", back_populates="user")
    event_bookings = relationship("EventBooking", back_populates="user")
