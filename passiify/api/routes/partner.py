"""
Partner-facing settlement routes (gym owners and event hosts).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from passiify.db.session import get_db
from passiify.models.user import User
from passiify.schemas.settlement import SettlementOverview, SettlementSummary
from passiify.services.settlement_service import build_gym_rows, build_event_rows
from passiify.api.dependencies import get_current_user

router = APIRouter(tags=["partner"])


@router.get("/gyms/me/settlement", response_model=SettlementOverview)
async def my_gym_settlement(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending payouts for the gyms owned by the current partner."""
    gyms = build_gym_rows(db, owner_id=current_user.id)
    return SettlementOverview(summary=SettlementSummary.from_rows(gyms, []), gyms=gyms)


@router.get("/events/host/settlement", response_model=SettlementOverview)
async def my_event_settlement(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Pending payouts for the events hosted by the current partner."""
    events = build_event_rows(db, host_id=current_user.id)
    return SettlementOverview(summary=SettlementSummary.from_rows([], events), events=events)
