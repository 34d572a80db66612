"""
Settlement service: pending payout aggregation per partner and payout marking.
"""
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime, timezone
from decimal import Decimal
import logging
from passiify.models.booking import Booking, EventBooking, PaymentStatus, PayoutStatus, payout_snapshot
from passiify.models.gym import Gym
from passiify.models.event import Event
from passiify.schemas.settlement import (
    GymSettlementRow, EventSettlementRow, SettlementSummary, SettlementOverview
)

logger = logging.getLogger(__name__)


def _decimal(value) -> Decimal:
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


def _pending_filter(model):
    """Paid bookings whose payout has not been settled (NULL counts as pending)."""
    return (
        model.payment_status == PaymentStatus.PAID,
        or_(model.payout_status == PayoutStatus.PENDING, model.payout_status.is_(None)),
    )


def _net_payable(snapshot: Decimal, gross: Decimal, platform_fee: Decimal, razorpay_fee: Decimal) -> Decimal:
    """Prefer the summed payout snapshot; otherwise derive it from the fees."""
    if snapshot:
        return snapshot
    return payout_snapshot(gross, platform_fee, razorpay_fee)


def build_gym_rows(db: Session, owner_id: Optional[int] = None) -> List[GymSettlementRow]:
    """Aggregate pending paid gym bookings into one row per gym."""
    query = db.query(
        Booking.gym_id,
        func.count(Booking.id),
        func.sum(Booking.price),
        func.sum(Booking.platform_fee),
        func.sum(Booking.razorpay_fee),
        func.sum(Booking.gym_payout),
    ).filter(*_pending_filter(Booking))

    if owner_id is not None:
        query = query.join(Gym, Gym.id == Booking.gym_id).filter(Gym.owner_id == owner_id)

    aggregates = query.group_by(Booking.gym_id).order_by(Booking.gym_id).all()

    gym_ids = [row[0] for row in aggregates]
    gyms = db.query(Gym).filter(Gym.id.in_(gym_ids)).all() if gym_ids else []
    gym_map = {gym.id: gym for gym in gyms}

    rows = []
    for gym_id, count, gross, platform_fee, razorpay_fee, snapshot in aggregates:
        gym = gym_map.get(gym_id)
        gross = _decimal(gross)
        platform_fee = _decimal(platform_fee)
        razorpay_fee = _decimal(razorpay_fee)
        net = _net_payable(_decimal(snapshot), gross, platform_fee, razorpay_fee)
        rows.append(GymSettlementRow(
            gym_id=gym_id,
            gym_name=gym.name if gym else "Gym",
            city=(gym.city or "") if gym else "",
            owner_id=gym.owner_id if gym else None,
            total_bookings=count or 0,
            gross_amount=float(gross),
            platform_fee=float(platform_fee),
            razorpay_fee=float(razorpay_fee),
            net_payable=float(net),
        ))
    return rows


def build_event_rows(db: Session, host_id: Optional[int] = None) -> List[EventSettlementRow]:
    """Aggregate pending paid event bookings into one row per event."""
    query = db.query(
        EventBooking.event_id,
        func.count(EventBooking.id),
        func.sum(EventBooking.tickets),
        func.sum(EventBooking.total_price),
        func.sum(EventBooking.platform_fee),
        func.sum(EventBooking.razorpay_fee),
        func.sum(EventBooking.host_payout),
    ).filter(*_pending_filter(EventBooking))

    if host_id is not None:
        query = query.join(Event, Event.id == EventBooking.event_id).filter(Event.host_id == host_id)

    aggregates = query.group_by(EventBooking.event_id).order_by(EventBooking.event_id).all()

    event_ids = [row[0] for row in aggregates]
    events = db.query(Event).filter(Event.id.in_(event_ids)).all() if event_ids else []
    event_map = {ev.id: ev for ev in events}

    rows = []
    for event_id, count, tickets, gross, platform_fee, razorpay_fee, snapshot in aggregates:
        ev = event_map.get(event_id)
        gross = _decimal(gross)
        platform_fee = _decimal(platform_fee)
        razorpay_fee = _decimal(razorpay_fee)
        net = _net_payable(_decimal(snapshot), gross, platform_fee, razorpay_fee)
        rows.append(EventSettlementRow(
            event_id=event_id,
            event_name=ev.name if ev else "Event",
            organizer=(ev.organizer or "") if ev else "",
            host_id=ev.host_id if ev else None,
            location=(ev.location or ev.city or "") if ev else "",
            event_date=ev.date if ev else None,
            total_bookings=count or 0,
            tickets_sold=tickets or 0,
            gross_amount=float(gross),
            platform_fee=float(platform_fee),
            razorpay_fee=float(razorpay_fee),
            net_payable=float(net),
        ))
    return rows


def build_settlement_overview(db: Session) -> SettlementOverview:
    """Build the admin settlement snapshot for every gym and event."""
    gyms = build_gym_rows(db)
    events = build_event_rows(db)
    overview = SettlementOverview(summary=SettlementSummary.from_rows(gyms, events), gyms=gyms, events=events)
    logger.info(
        f"Settlement overview built: {len(gyms)} gym(s), {len(events)} event(s), "
        f"net payable {overview.summary.total_net_payable:.2f}"
    )
    return overview


def _mark_paid(db: Session, model, partner_column, partner_id: int,
               note: Optional[str], batch_id: Optional[str]) -> int:
    values = {
        model.payout_status: PayoutStatus.PAID,
        model.payout_at: datetime.now(timezone.utc).replace(tzinfo=None),
    }
    if note:
        values[model.payout_note] = note
    if batch_id:
        values[model.payout_batch_id] = batch_id

    modified = db.query(model).filter(
        partner_column == partner_id,
        *_pending_filter(model)
    ).update(values, synchronize_session=False)
    db.commit()
    return modified


def mark_gym_payouts_paid(db: Session, gym_id: int, note: Optional[str] = None,
                          batch_id: Optional[str] = None) -> int:
    """Mark every pending paid booking of a gym as paid out. Returns the row count."""
    modified = _mark_paid(db, Booking, Booking.gym_id, gym_id, note, batch_id)
    logger.info(f"Marked {modified} gym booking(s) as paid for gym {gym_id}")
    return modified


def mark_event_payouts_paid(db: Session, event_id: int, note: Optional[str] = None,
                            batch_id: Optional[str] = None) -> int:
    """Mark every pending paid booking of an event as paid out. Returns the row count."""
    modified = _mark_paid(db, EventBooking, EventBooking.event_id, event_id, note, batch_id)
    logger.info(f"Marked {modified} event booking(s) as paid for event {event_id}")
    return modified
