"""
Client-side derivations over a settlement snapshot: filtering, sorting,
pagination and summary metrics. Everything here is pure.
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence, Tuple, TypeVar, Union
from passiify.schemas.settlement import (
    GymSettlementRow, EventSettlementRow, SettlementOverview, SettlementSummary
)

ROWS_PER_PAGE = 15

GYM_SEARCH_FIELDS = ("gym_name", "city")
EVENT_SEARCH_FIELDS = ("event_name", "organizer", "location")

SettlementRow = Union[GymSettlementRow, EventSettlementRow]
T = TypeVar("T")


def search_fields(row: SettlementRow) -> Tuple[str, ...]:
    if isinstance(row, EventSettlementRow):
        return EVENT_SEARCH_FIELDS
    return GYM_SEARCH_FIELDS


def parse_min_net(value: Union[str, int, float, Decimal, None]) -> float:
    """Minimum-net input as a number; blank or unparseable input means 0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def matches_search(row: SettlementRow, search_term: Optional[str]) -> bool:
    """Case-insensitive substring match on the row's text fields."""
    query = (search_term or "").strip().lower()
    if not query:
        return True
    return any(query in (getattr(row, field, "") or "").lower() for field in search_fields(row))


def compute_filtered_rows(
    rows: Sequence[T],
    search_term: Optional[str] = "",
    min_net_filter: Union[str, int, float, None] = None
) -> List[T]:
    """
    Rows matching the search AND meeting the minimum net payable, sorted by
    net payable, highest first (stable for ties).

    A blank or zero threshold disables the net filter, so rows with a
    negative net payable stay visible until a threshold is entered.
    """
    minimum = parse_min_net(min_net_filter)
    filtered = [
        row for row in rows
        if matches_search(row, search_term) and (not minimum or row.net_payable >= minimum)
    ]
    return sorted(filtered, key=lambda row: row.net_payable, reverse=True)


def paginate(rows: Sequence[T], page: int, page_size: int = ROWS_PER_PAGE) -> List[T]:
    """1-based page slice. Out-of-range pages are not clamped."""
    return list(rows[(page - 1) * page_size:page * page_size])


def total_pages(count: int, page_size: int = ROWS_PER_PAGE) -> int:
    return max(1, math.ceil(count / page_size))


def page_window(count: int, page: int, page_size: int = ROWS_PER_PAGE) -> Tuple[int, int]:
    """1-based (first, last) row numbers shown on `page`; (0, 0) when empty."""
    if count == 0:
        return 0, 0
    return (page - 1) * page_size + 1, min(count, page * page_size)


def total_partners(overview: SettlementOverview) -> int:
    return len(overview.gyms) + len(overview.events)


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def effective_take_rate(summary: SettlementSummary) -> int:
    """Platform plus gateway fees as a whole percentage of gross; 0 when gross is 0."""
    gross = summary.total_gross or 0
    if not gross:
        return 0
    fees = (summary.total_platform_fee or 0) + (summary.total_razorpay_fee or 0)
    return round_half_up(fees / gross * 100)


def group_indian(digits: str) -> str:
    """Indian digit grouping: 1234567 -> 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_number(value) -> str:
    """Whole number with Indian grouping; non-numeric input renders as 0."""
    number = parse_min_net(value)
    rounded = round_half_up(number)
    sign = "-" if rounded < 0 else ""
    return sign + group_indian(str(abs(rounded)))


def format_inr(value) -> str:
    """Rupee amount without decimals, e.g. ₹1,23,456."""
    formatted = format_number(value)
    if formatted.startswith("-"):
        return "-₹" + formatted[1:]
    return "₹" + formatted
