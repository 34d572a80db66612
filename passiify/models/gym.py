"""
Gym model for studios selling day passes.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from passiify.db.base import BaseModel


class Gym(BaseModel):
    """Gym / studio listed by a partner."""
    __tablename__ = "gyms"

    name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    owner = relationship("User", back_populates="gyms")
    bookings = relationship("Booking", back_populates="gym", cascade="all, delete-orphan")
