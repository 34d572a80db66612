"""
Pydantic schemas for partner settlements and payouts.

Field aliases match the camelCase JSON contract shared with the web console,
so the same models serve the API responses and the client-side parsing.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime

PartnerId = Union[int, str]


class SettlementRowBase(BaseModel):
    """Money columns shared by gym and event rows."""
    total_bookings: int = Field(default=0, alias="totalBookings")
    gross_amount: float = Field(default=0, alias="grossAmount")
    platform_fee: float = Field(default=0, alias="platformFee")
    razorpay_fee: float = Field(default=0, alias="razorpayFee")
    net_payable: float = Field(default=0, alias="netPayable")
    currency: str = "INR"

    class Config:
        populate_by_name = True
        extra = "ignore"


class GymSettlementRow(SettlementRowBase):
    """Pending payout position of one gym."""
    gym_id: PartnerId = Field(alias="gymId")
    gym_name: str = Field(default="", alias="gymName")
    city: str = ""
    owner_id: Optional[PartnerId] = Field(default=None, alias="ownerId")


class EventSettlementRow(SettlementRowBase):
    """Pending payout position of one event host for one event."""
    event_id: PartnerId = Field(alias="eventId")
    event_name: str = Field(default="", alias="eventName")
    organizer: str = ""
    host_id: Optional[PartnerId] = Field(default=None, alias="hostId")
    location: str = ""
    event_date: Optional[datetime] = Field(default=None, alias="eventDate")
    tickets_sold: int = Field(default=0, alias="ticketsSold")


class SettlementSummary(BaseModel):
    """Totals across every partner row."""
    total_gross: float = Field(default=0, alias="totalGross")
    total_platform_fee: float = Field(default=0, alias="totalPlatformFee")
    total_razorpay_fee: float = Field(default=0, alias="totalRazorpayFee")
    total_net_payable: float = Field(default=0, alias="totalNetPayable")

    class Config:
        populate_by_name = True
        extra = "ignore"

    @classmethod
    def from_rows(cls, gyms: List[GymSettlementRow], events: List[EventSettlementRow]) -> "SettlementSummary":
        """Sum the money columns of both collections."""
        rows = list(gyms) + list(events)
        return cls(
            total_gross=sum(row.gross_amount for row in rows),
            total_platform_fee=sum(row.platform_fee for row in rows),
            total_razorpay_fee=sum(row.razorpay_fee for row in rows),
            total_net_payable=sum(row.net_payable for row in rows),
        )


class SettlementOverview(BaseModel):
    """Full settlement snapshot returned by the admin overview endpoint."""
    summary: SettlementSummary = Field(default_factory=SettlementSummary)
    gyms: List[GymSettlementRow] = Field(default_factory=list)
    events: List[EventSettlementRow] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        extra = "ignore"


class MarkPaidRequest(BaseModel):
    """Body for marking a partner's pending payouts as paid."""
    note: Optional[str] = None
    batch_id: Optional[str] = Field(default=None, alias="batchId")

    class Config:
        populate_by_name = True


class MarkPaidResponse(BaseModel):
    """Result of a mark-as-paid command."""
    message: str
    modified_count: int = Field(alias="modifiedCount")

    class Config:
        populate_by_name = True
