"""
Booking models for gym passes and event tickets, with payout accounting.
"""
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Integer, Enum as SQLEnum, event
from sqlalchemy.orm import relationship
from passiify.db.base import BaseModel
import enum


class PaymentStatus(str, enum.Enum):
    """Payment status of a booking."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PayoutStatus(str, enum.Enum):
    """Status of the payout owed to the partner for a booking."""
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"


def payout_snapshot(price, platform_fee, razorpay_fee) -> Decimal:
    """What the partner should receive: price minus fees, never below zero."""
    gross = Decimal(price or 0)
    fees = Decimal(platform_fee or 0) + Decimal(razorpay_fee or 0)
    return max(Decimal(0), gross - fees)


class Booking(BaseModel):
    """Gym pass booking."""
    __tablename__ = "bookings"

    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="INR")

    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PAID, nullable=False)
    platform_fee = Column(Numeric(12, 2), nullable=False, default=0)  # Commission snapshot
    razorpay_fee = Column(Numeric(12, 2), nullable=False, default=0)  # Gateway cost snapshot
    gym_payout = Column(Numeric(12, 2), nullable=False, default=0)

    # NULL marks legacy rows written before payouts were tracked; treated as pending.
    payout_status = Column(SQLEnum(PayoutStatus), default=PayoutStatus.PENDING, nullable=True)
    payout_at = Column(DateTime, nullable=True)
    payout_batch_id = Column(String(100), nullable=True)
    payout_note = Column(String(500), nullable=True)

    # Relationships
    gym = relationship("Gym", back_populates="bookings")
    user = relationship("User", back_populates="bookings")


class EventBooking(BaseModel):
    """Event ticket booking."""
    __tablename__ = "event_bookings"

    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    tickets = Column(Integer, nullable=False, default=1)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="INR")

    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PAID, nullable=False)
    platform_fee = Column(Numeric(12, 2), nullable=False, default=0)
    razorpay_fee = Column(Numeric(12, 2), nullable=False, default=0)
    host_payout = Column(Numeric(12, 2), nullable=False, default=0)

    payout_status = Column(SQLEnum(PayoutStatus), default=PayoutStatus.PENDING, nullable=True)
    payout_at = Column(DateTime, nullable=True)
    payout_batch_id = Column(String(100), nullable=True)
    payout_note = Column(String(500), nullable=True)

    # Relationships
    event = relationship("Event", back_populates="bookings")
    user = relationship("User", back_populates="event_bookings")


@event.listens_for(Booking, "before_insert")
def _fill_gym_payout(mapper, connection, target):
    if not target.gym_payout and target.price:
        target.gym_payout = payout_snapshot(target.price, target.platform_fee, target.razorpay_fee)


@event.listens_for(EventBooking, "before_insert")
def _fill_host_payout(mapper, connection, target):
    if not target.host_payout and target.total_price:
        target.host_payout = payout_snapshot(target.total_price, target.platform_fee, target.razorpay_fee)
