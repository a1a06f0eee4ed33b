from datetime import date, timedelta
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from quotewise.config import settings


class Traveler(BaseModel):
    id: str  # e.g. "A1", "C1"
    label: str  # e.g. "Adult 1", "Child 1"
    type: Literal["adult", "child"]


class TripSettings(BaseModel):
    start_date: date
    num_days: int = Field(default=1, ge=1)
    currency: str = Field(default_factory=lambda: settings.default_display_currency, min_length=3, max_length=3)
    budget: Decimal | None = Field(default=None, ge=0)

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()

    def date_of_day(self, day: int) -> date:
        """Calendar date of a 1-based trip day."""
        return self.start_date + timedelta(days=day - 1)


class BaseItem(BaseModel):
    id: str
    day: int = Field(ge=1)
    name: str
    note: str | None = None
    service_id: str
    excluded_traveler_ids: frozenset[str] = frozenset()


class RoomBooking(BaseModel):
    id: str | None = None
    room_type_id: str
    num_rooms: int = 1
    extra_bed: bool = False
    assigned_traveler_ids: list[str] = Field(default_factory=list)


class HotelItem(BaseItem):
    type: Literal["hotel"] = "hotel"
    checkout_day: int
    room_bookings: list[RoomBooking] = Field(default_factory=list)


class ActivityItem(BaseItem):
    type: Literal["activity"] = "activity"
    package_id: str | None = None


class TransferItem(BaseItem):
    type: Literal["transfer"] = "transfer"
    vehicle_option_id: str | None = None
    vehicles: int = 1


class MealItem(BaseItem):
    type: Literal["meal"] = "meal"
    quantity: int = Field(default=1, ge=0)


class MiscItem(BaseItem):
    type: Literal["misc"] = "misc"
    quantity: int = Field(default=1, ge=0)


ItineraryItem = Annotated[
    Union[HotelItem, ActivityItem, TransferItem, MealItem, MiscItem],
    Field(discriminator="type"),
]


class DayItinerary(BaseModel):
    items: list[ItineraryItem] = Field(default_factory=list)


class Itinerary(BaseModel):
    settings: TripSettings
    travelers: list[Traveler] = Field(default_factory=list)
    days: dict[int, DayItinerary] = Field(default_factory=dict)

    def iter_items(self):
        """Yield every item in day order, then in-day order."""
        for day in sorted(self.days):
            yield from self.days[day].items
