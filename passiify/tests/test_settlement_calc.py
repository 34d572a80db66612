"""
Tests for filtering, sorting, pagination and summary metrics of settlement rows.
"""
import pytest

from passiify.client import settlements as calc
from passiify.schemas.settlement import (
    GymSettlementRow, EventSettlementRow, SettlementOverview, SettlementSummary
)


def gym(gym_id, name="Gym", city="", net=0):
    return GymSettlementRow(gym_id=gym_id, gym_name=name, city=city, net_payable=net)


def event(event_id, name="Event", organizer="", location="", net=0):
    return EventSettlementRow(
        event_id=event_id, event_name=name, organizer=organizer, location=location, net_payable=net
    )


def test_search_and_min_net_are_combined():
    rows = [
        gym(1, "Iron Gym", "Mumbai", 1500),
        gym(2, "Flex Studio", "Mumbai", 500),
        gym(3, "Peak Gym", "Delhi", 2000),
    ]

    result = calc.compute_filtered_rows(rows, "mumbai", 1000)

    assert [row.gym_name for row in result] == ["Iron Gym"]


def test_search_is_trimmed_and_case_insensitive():
    rows = [gym(1, "Iron Gym", "Mumbai"), gym(2, "Peak Gym", "Delhi")]
    assert [row.gym_id for row in calc.compute_filtered_rows(rows, "  IRON ")] == [1]


def test_event_search_covers_organizer_and_location():
    rows = [
        event(1, "Sunburn Night", "Percept", "Goa"),
        event(2, "Comedy Hour", "Laugh Club", "Pune"),
    ]
    assert [row.event_id for row in calc.compute_filtered_rows(rows, "percept")] == [1]
    assert [row.event_id for row in calc.compute_filtered_rows(rows, "pune")] == [2]
    assert [row.event_id for row in calc.compute_filtered_rows(rows, "comedy")] == [2]


def test_sorted_by_net_payable_descending():
    rows = [gym(1, net=300), gym(2, net=5000), gym(3, net=1200)]
    assert [row.net_payable for row in calc.compute_filtered_rows(rows)] == [5000, 1200, 300]


def test_sort_is_stable_for_ties():
    rows = [gym(1, net=100), gym(2, net=100), gym(3, net=100)]
    assert [row.gym_id for row in calc.compute_filtered_rows(rows)] == [1, 2, 3]


@pytest.mark.parametrize("value", ["", "   ", None, "abc", 0, "0"])
def test_blank_or_zero_threshold_keeps_negative_rows(value):
    rows = [gym(1, net=-50), gym(2, net=0), gym(3, net=10)]
    assert [row.gym_id for row in calc.compute_filtered_rows(rows, "", value)] == [3, 2, 1]


def test_negative_threshold_shows_negative_rows():
    rows = [gym(1, net=-50), gym(2, net=10)]
    assert [row.gym_id for row in calc.compute_filtered_rows(rows, "", "-100")] == [2, 1]


def test_threshold_is_inclusive():
    rows = [gym(1, net=999.99), gym(2, net=1000), gym(3, net=-20)]
    assert [row.gym_id for row in calc.compute_filtered_rows(rows, "", "1000")] == [2]


def test_parse_min_net():
    assert calc.parse_min_net("1500") == 1500
    assert calc.parse_min_net(" 12.5 ") == 12.5
    assert calc.parse_min_net("nan") == 0
    assert calc.parse_min_net("lots") == 0


def test_pagination_boundaries():
    rows = list(range(32))

    assert calc.total_pages(len(rows), 15) == 3
    assert len(calc.paginate(rows, 1, 15)) == 15
    assert len(calc.paginate(rows, 2, 15)) == 15
    assert calc.paginate(rows, 3, 15) == [30, 31]
    assert calc.paginate(rows, 4, 15) == []


def test_page_window():
    assert calc.page_window(32, 1, 15) == (1, 15)
    assert calc.page_window(32, 3, 15) == (31, 32)
    assert calc.page_window(0, 1, 15) == (0, 0)
    assert calc.total_pages(0, 15) == 1


def test_take_rate_with_zero_gross():
    assert calc.effective_take_rate(SettlementSummary()) == 0


def test_take_rate_rounds_half_up():
    summary = SettlementSummary(total_gross=5300, total_platform_fee=530, total_razorpay_fee=110)
    assert calc.effective_take_rate(summary) == 12

    summary = SettlementSummary(total_gross=200, total_platform_fee=20, total_razorpay_fee=5)
    assert calc.effective_take_rate(summary) == 13


def test_total_partners():
    overview = SettlementOverview(gyms=[gym(1), gym(2)], events=[event(1)])
    assert calc.total_partners(overview) == 3


@pytest.mark.parametrize("value,expected", [
    (0, "₹0"),
    (999, "₹999"),
    (1000, "₹1,000"),
    (123456, "₹1,23,456"),
    (12345678.6, "₹1,23,45,679"),
    (-4500, "-₹4,500"),
    ("oops", "₹0"),
])
def test_format_inr(value, expected):
    assert calc.format_inr(value) == expected
