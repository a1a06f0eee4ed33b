"""Tests for per-category line item pricing."""

from datetime import date
from decimal import Decimal

import pytest

from quotewise.exceptions import (
    CapacityExceededError,
    InvalidConfigurationError,
    PerNightError,
    SchedulingConflictError,
)
from quotewise.schemas.catalog import CatalogEntry
from quotewise.schemas.itinerary import (
    ActivityItem,
    HotelItem,
    MealItem,
    MiscItem,
    RoomBooking,
    TransferItem,
)
from quotewise.services.line_item_resolver import (
    PER_TRAVELER,
    ROOMS,
    SHARED,
    SPLIT,
    RequestContext,
    price_line_item,
)

MONDAY = date(2025, 1, 6)


def _ctx(day=MONDAY, adults=2, children=1):
    return RequestContext(service_date=day, adults=adults, children=children)


# --- hotel ---


def test_hotel_uses_checkout_minus_arrival_nights(entries_by_id):
    item = HotelItem(
        id="h", day=3, checkout_day=6, name="Stay", service_id="H1",
        room_bookings=[RoomBooking(room_type_id="dlx", num_rooms=2)],
    )
    priced = price_line_item(entries_by_id["H1"], item, _ctx(day=date(2025, 1, 8)))
    assert priced.total == Decimal("700")
    assert priced.allocation == ROOMS
    assert priced.configuration == "Prov: Bangkok; In: Day 3, Out: Day 6 (3n); Rooms: 2x Deluxe"


def test_hotel_checkout_before_arrival_is_invalid(entries_by_id):
    item = HotelItem(
        id="h", day=3, checkout_day=3, name="Stay", service_id="H1",
        room_bookings=[RoomBooking(room_type_id="dlx")],
    )
    with pytest.raises(InvalidConfigurationError):
        price_line_item(entries_by_id["H1"], item, _ctx())


# --- activity ---


def test_activity_prices_adults_and_children(entries_by_id):
    item = ActivityItem(id="a", day=1, name="Tour", service_id="ACT1", package_id="half")
    priced = price_line_item(entries_by_id["ACT1"], item, _ctx())
    assert priced.total == Decimal("2500")
    assert priced.allocation == PER_TRAVELER
    assert (priced.adult_unit, priced.child_unit) == (Decimal("1000"), Decimal("500"))


def test_activity_defaults_to_first_package(entries_by_id):
    item = ActivityItem(id="a", day=1, name="Tour", service_id="ACT1")
    priced = price_line_item(entries_by_id["ACT1"], item, _ctx(adults=1, children=0))
    assert priced.total == Decimal("1000")
    assert "Half Day" in priced.configuration


def test_activity_child_price_falls_back_to_adult(entries_by_id):
    item = ActivityItem(id="a", day=1, name="Tour", service_id="ACT1", package_id="full")
    priced = price_line_item(entries_by_id["ACT1"], item, _ctx(adults=1, children=1))
    assert priced.total == Decimal("4000")


def test_activity_on_specific_closed_date_conflicts(entries_by_id):
    item = ActivityItem(id="a", day=3, name="Tour", service_id="ACT1", package_id="half")
    with pytest.raises(SchedulingConflictError) as exc_info:
        price_line_item(entries_by_id["ACT1"], item, _ctx(day=date(2025, 1, 8)))
    assert exc_info.value.status == "closed_specific"
    assert exc_info.value.code == "scheduling_conflict"


def test_activity_on_closed_weekday_conflicts(entries_by_id):
    item = ActivityItem(id="a", day=7, name="Tour", service_id="ACT1", package_id="half")
    with pytest.raises(SchedulingConflictError) as exc_info:
        price_line_item(entries_by_id["ACT1"], item, _ctx(day=date(2025, 1, 12)))
    assert exc_info.value.status == "closed_weekday"


def test_activity_outside_validity_conflicts(entries_by_id):
    item = ActivityItem(id="a", day=1, name="Tour", service_id="ACT1", package_id="half")
    with pytest.raises(SchedulingConflictError) as exc_info:
        price_line_item(entries_by_id["ACT1"], item, _ctx(day=date(2025, 4, 1)))
    assert exc_info.value.status == "invalid_range"


def test_activity_unknown_package_is_invalid(entries_by_id):
    item = ActivityItem(id="a", day=1, name="Tour", service_id="ACT1", package_id="night")
    with pytest.raises(InvalidConfigurationError):
        price_line_item(entries_by_id["ACT1"], item, _ctx())


# --- transfers ---


def test_ticket_transfer_child_falls_back_to_adult(entries_by_id):
    item = TransferItem(id="t", day=1, name="Ferry", service_id="FERRY")
    priced = price_line_item(entries_by_id["FERRY"], item, _ctx())
    assert priced.total == Decimal("900")
    assert priced.allocation == PER_TRAVELER
    assert priced.configuration.startswith("Mode: ticket")


def test_vehicle_transfer_adds_matching_surcharge(entries_by_id):
    item = TransferItem(id="t", day=1, name="Van", service_id="VAN", vehicle_option_id="van")
    priced = price_line_item(entries_by_id["VAN"], item, _ctx())
    # Jan 6 falls only in the Peak period
    assert priced.total == Decimal("2025")
    assert priced.allocation == SHARED
    assert "Surcharge: Peak" in priced.configuration


def test_vehicle_surcharges_accumulate_when_periods_overlap(entries_by_id):
    item = TransferItem(id="t", day=1, name="Van", service_id="VAN", vehicle_option_id="van")
    priced = price_line_item(entries_by_id["VAN"], item, _ctx(day=date(2025, 1, 1)))
    assert priced.total == Decimal("2525")


def test_vehicle_without_surcharge_outside_periods(entries_by_id):
    item = TransferItem(id="t", day=1, name="Van", service_id="VAN", vehicle_option_id="bus")
    priced = price_line_item(entries_by_id["VAN"], item, _ctx(day=date(2025, 2, 1)))
    assert priced.total == Decimal("3650")
    assert "Surcharge" not in priced.configuration


def test_vehicle_capacity_exceeded(entries_by_id):
    item = TransferItem(id="t", day=1, name="Van", service_id="VAN", vehicle_option_id="van")
    with pytest.raises(CapacityExceededError) as exc_info:
        price_line_item(entries_by_id["VAN"], item, _ctx(adults=4, children=1))
    assert (exc_info.value.travelers, exc_info.value.capacity) == (5, 4)


def test_vehicle_count_scales_price_and_capacity(entries_by_id):
    item = TransferItem(id="t", day=1, name="Van", service_id="VAN", vehicle_option_id="van", vehicles=2)
    priced = price_line_item(entries_by_id["VAN"], item, _ctx(adults=5, children=1))
    assert priced.total == Decimal("4050")


def test_vehicle_unknown_option_is_invalid(entries_by_id):
    item = TransferItem(id="t", day=1, name="Van", service_id="VAN", vehicle_option_id="limo")
    with pytest.raises(InvalidConfigurationError):
        price_line_item(entries_by_id["VAN"], item, _ctx())


# --- meal / misc ---


def test_meal_per_person_uses_secondary_price_for_children(entries_by_id):
    item = MealItem(id="m", day=1, name="Dinner", service_id="DIN", quantity=2)
    priced = price_line_item(entries_by_id["DIN"], item, _ctx())
    # 2 adults * 25 * 2 + 1 child * 15 * 2
    assert priced.total == Decimal("130")
    assert (priced.adult_unit, priced.child_unit) == (Decimal("50"), Decimal("30"))


def test_misc_total_is_price_times_quantity(entries_by_id):
    item = MiscItem(id="x", day=1, name="Guide", service_id="GUIDE", quantity=3)
    priced = price_line_item(entries_by_id["GUIDE"], item, _ctx())
    assert priced.total == Decimal("360")
    assert priced.allocation == SPLIT


def test_misc_per_person():
    entry = CatalogEntry.model_validate({
        "id": "TIP", "name": "Tips", "currency": "usd",
        "payload": {"category": "misc", "price": "5", "cost_assignment": "per_person"},
    })
    item = MiscItem(id="x", day=1, name="Tips", service_id="TIP")
    priced = price_line_item(entry, item, _ctx())
    assert priced.total == Decimal("15")
    assert priced.currency == "USD"


# --- dispatch ---


def test_item_type_must_match_entry_category(entries_by_id):
    item = MealItem(id="m", day=1, name="Dinner", service_id="H1")
    with pytest.raises(InvalidConfigurationError, match="is a meal"):
        price_line_item(entries_by_id["H1"], item, _ctx())


def test_errors_carry_configuration_text(entries_by_id):
    item = TransferItem(id="t", day=1, name="Van", service_id="VAN", vehicle_option_id="van")
    with pytest.raises(CapacityExceededError) as exc_info:
        price_line_item(entries_by_id["VAN"], item, _ctx(adults=5, children=0))
    assert exc_info.value.configuration.startswith("Mode: vehicle; Type: Van; #Veh: 1")


def test_hotel_gap_error_keeps_province_and_rooms(entries_by_id):
    item = HotelItem(
        id="h", day=1, checkout_day=2, name="Stay", service_id="H1",
        room_bookings=[RoomBooking(room_type_id="std")],
    )
    with pytest.raises(PerNightError) as exc_info:
        price_line_item(entries_by_id["H1"], item, _ctx())
    assert exc_info.value.configuration == "Prov: Bangkok; In: Day 1, Out: Day 2 (1n); Rooms: 1x Standard"
