from datetime import date
from decimal import Decimal

import httpx
import pytest
from httpx import ASGITransport

from quotewise.schemas.catalog import CatalogEntry
from quotewise.schemas.itinerary import Itinerary
from quotewise.schemas.rates import ExchangeRate
from quotewise.services.currency_service import CurrencyConverter
from quotewise.services.repositories import InMemoryCatalogRepository

# Trip starts on Monday 2025-01-06; day N is 2025-01-(5+N)
TRIP_START = date(2025, 1, 6)


HOTEL = {
    "id": "H1",
    "name": "Riverside Hotel",
    "province": "Bangkok",
    "currency": "USD",
    "unit_description": "per room per night",
    "payload": {
        "category": "hotel",
        "room_types": [
            {
                "id": "dlx",
                "name": "Deluxe",
                "extra_bed_allowed": True,
                "seasonal_prices": [
                    {"season_name": "January", "start_date": "2025-01-01", "end_date": "2025-01-31",
                     "rate": "100", "extra_bed_rate": "20"},
                    {"season_name": "Festival", "start_date": "2025-01-10", "end_date": "2025-01-12",
                     "rate": "150", "extra_bed_rate": "30"},
                ],
            },
            {
                "id": "std",
                "name": "Standard",
                "seasonal_prices": [
                    {"start_date": "2025-01-01", "end_date": "2025-01-05", "rate": "80", "extra_bed_rate": "10"},
                ],
            },
        ],
    },
}

ACTIVITY = {
    "id": "ACT1",
    "name": "Floating Market Tour",
    "currency": "THB",
    "unit_description": "per person",
    "payload": {
        "category": "activity",
        "packages": [
            {
                "id": "half",
                "name": "Half Day",
                "adult_price": "1000",
                "child_price": "500",
                "validity_start": "2025-01-01",
                "validity_end": "2025-03-31",
                "closed_weekdays": [0],
                "specific_closed_dates": ["2025-01-08"],
            },
            {"id": "full", "name": "Full Day", "adult_price": "2000"},
        ],
    },
}

FERRY = {
    "id": "FERRY",
    "name": "Pier to Island Ferry",
    "currency": "THB",
    "unit_description": "per ticket",
    "payload": {
        "category": "transfer",
        "pricing": {"mode": "ticket", "adult_price": "300"},
    },
}

VAN = {
    "id": "VAN",
    "name": "Airport to City Hotel",
    "currency": "THB",
    "unit_description": "per vehicle",
    "payload": {
        "category": "transfer",
        "pricing": {
            "mode": "vehicle",
            "vehicle_options": [
                {"id": "van", "vehicle_type": "Van", "price": "1825", "max_passengers": 4},
                {"id": "bus", "vehicle_type": "Minibus", "price": "3650", "max_passengers": 10},
            ],
            "surcharge_periods": [
                {"name": "New Year", "start_date": "2025-01-01", "end_date": "2025-01-02", "amount": "500"},
                {"name": "Peak", "start_date": "2025-01-01", "end_date": "2025-01-15", "amount": "200"},
            ],
        },
    },
}

DINNER = {
    "id": "DIN",
    "name": "Set Dinner",
    "currency": "USD",
    "unit_description": "per meal",
    "payload": {"category": "meal", "price": "25", "secondary_price": "15", "cost_assignment": "per_person"},
}

GUIDE = {
    "id": "GUIDE",
    "name": "Private Guide",
    "currency": "USD",
    "unit_description": "per day",
    "payload": {"category": "misc", "price": "120", "cost_assignment": "total"},
}

TRAVELERS = [
    {"id": "A1", "label": "Adult 1", "type": "adult"},
    {"id": "A2", "label": "Adult 2", "type": "adult"},
    {"id": "C1", "label": "Child 1", "type": "child"},
]


def build_itinerary(days: dict, travelers=None, currency="USD", budget=None) -> Itinerary:
    return Itinerary.model_validate({
        "settings": {"start_date": TRIP_START.isoformat(), "num_days": 5, "currency": currency, "budget": budget},
        "travelers": TRAVELERS if travelers is None else travelers,
        "days": {day: {"items": items} for day, items in days.items()},
    })


def full_trip_days() -> dict:
    """Itinerary used across aggregator and router tests."""
    return {
        1: [
            {"type": "activity", "id": "i-act", "day": 1, "name": "Market tour",
             "service_id": "ACT1", "package_id": "half"},
            {"type": "hotel", "id": "i-hotel", "day": 1, "name": "Riverside", "service_id": "H1",
             "checkout_day": 3,
             "room_bookings": [
                 {"room_type_id": "dlx", "num_rooms": 1, "assigned_traveler_ids": ["A1", "A2"]},
                 {"room_type_id": "dlx", "num_rooms": 1, "assigned_traveler_ids": ["C1"]},
             ]},
        ],
        2: [
            {"type": "transfer", "id": "i-van", "day": 2, "name": "Airport run",
             "service_id": "VAN", "vehicle_option_id": "van"},
            {"type": "meal", "id": "i-dinner", "day": 2, "name": "Dinner", "service_id": "DIN"},
        ],
        3: [
            {"type": "misc", "id": "i-guide", "day": 3, "name": "Guide", "service_id": "GUIDE"},
        ],
    }


@pytest.fixture
def catalog_entries() -> list[CatalogEntry]:
    return [CatalogEntry.model_validate(e) for e in (HOTEL, ACTIVITY, FERRY, VAN, DINNER, GUIDE)]


@pytest.fixture
def catalog(catalog_entries) -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository(catalog_entries)


@pytest.fixture
def entries_by_id(catalog_entries) -> dict[str, CatalogEntry]:
    return {e.id: e for e in catalog_entries}


@pytest.fixture
def thb_rates() -> list[ExchangeRate]:
    return [ExchangeRate(from_currency="USD", to_currency="THB", rate=Decimal("40"))]


@pytest.fixture
def converter(thb_rates) -> CurrencyConverter:
    return CurrencyConverter(thb_rates, markup_percent=0)


@pytest.fixture
async def client():
    from quotewise.main import app

    async with httpx.AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c
