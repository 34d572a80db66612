"""Models package - Import all models for SQLAlchemy registration."""
from passiify.models.user import User, UserRole
from passiify.models.admin import Admin
from passiify.models.gym import Gym
from passiify.models.event import Event
from passiify.models.booking import Booking, EventBooking, PaymentStatus, PayoutStatus

__all__ = [
    "User",
    "UserRole",
    "Admin",
    "Gym",
    "Event",
    "Booking",
    "EventBooking",
    "PaymentStatus",
    "PayoutStatus",
]
