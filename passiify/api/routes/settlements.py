"""
Admin settlement and payout routes.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
from passiify.db.session import get_db
from passiify.models.admin import Admin
from passiify.schemas.settlement import SettlementOverview, MarkPaidRequest, MarkPaidResponse
from passiify.services.settlement_service import (
    build_settlement_overview, mark_gym_payouts_paid, mark_event_payouts_paid
)
from passiify.api.dependencies import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/settlements", tags=["settlements"])


@router.get("/overview", response_model=SettlementOverview)
async def settlements_overview(
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Pending payout position of every gym and event, with totals."""
    try:
        return build_settlement_overview(db)
    except SQLAlchemyError:
        logger.error("Error building settlements overview", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load settlements overview"
        )


@router.post("/mark-paid/gym/{gym_id}", response_model=MarkPaidResponse)
async def mark_gym_paid(
    gym_id: int,
    body: Optional[MarkPaidRequest] = None,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Mark all pending payouts for a gym as paid."""
    body = body or MarkPaidRequest()
    try:
        modified = mark_gym_payouts_paid(db, gym_id, note=body.note, batch_id=body.batch_id)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Error marking gym {gym_id} payouts as paid", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to mark gym payouts as paid"
        )
    return MarkPaidResponse(message="Gym payout(s) marked as paid", modified_count=modified)


@router.post("/mark-paid/event/{event_id}", response_model=MarkPaidResponse)
async def mark_event_paid(
    event_id: int,
    body: Optional[MarkPaidRequest] = None,
    current_admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Mark all pending payouts for an event host as paid."""
    body = body or MarkPaidRequest()
    try:
        modified = mark_event_payouts_paid(db, event_id, note=body.note, batch_id=body.batch_id)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Error marking event {event_id} payouts as paid", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to mark event payouts as paid"
        )
    return MarkPaidResponse(message="Event payout(s) marked as paid", modified_count=modified)
