"""Service catalog schemas — one payload variant per service category."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class DateRange(BaseModel):
    """Inclusive calendar range."""

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_order(self):
        if self.end_date < self.start_date:
            raise ValueError(f"end_date {self.end_date} precedes start_date {self.start_date}")
        return self

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class SeasonalPrice(DateRange):
    id: str | None = None
    season_name: str | None = None
    rate: Decimal = Field(ge=0)
    extra_bed_rate: Decimal | None = Field(default=None, ge=0)


class RoomType(BaseModel):
    id: str
    name: str
    extra_bed_allowed: bool = False
    notes: str | None = None
    seasonal_prices: list[SeasonalPrice] = Field(default_factory=list)


class HotelPayload(BaseModel):
    category: Literal["hotel"] = "hotel"
    room_types: list[RoomType] = Field(min_length=1)

    def room_type(self, room_type_id: str) -> RoomType | None:
        return next((rt for rt in self.room_types if rt.id == room_type_id), None)


class ActivityPackage(BaseModel):
    id: str
    name: str
    adult_price: Decimal = Field(ge=0)
    child_price: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None
    validity_start: date | None = None
    validity_end: date | None = None
    closed_weekdays: frozenset[int] = frozenset()  # 0 = Sunday … 6 = Saturday
    specific_closed_dates: frozenset[date] = frozenset()

    @field_validator("closed_weekdays")
    @classmethod
    def _check_weekdays(cls, value: frozenset[int]) -> frozenset[int]:
        bad = sorted(d for d in value if d < 0 or d > 6)
        if bad:
            raise ValueError(f"closed_weekdays must be within 0-6, got {bad}")
        return value


class ActivityPayload(BaseModel):
    category: Literal["activity"] = "activity"
    packages: list[ActivityPackage] = Field(min_length=1)

    def package(self, package_id: str | None) -> ActivityPackage | None:
        if package_id is None:
            return self.packages[0]
        return next((p for p in self.packages if p.id == package_id), None)


class VehicleOption(BaseModel):
    id: str
    vehicle_type: str
    price: Decimal = Field(ge=0)
    max_passengers: int = Field(ge=1)
    notes: str | None = None


class SurchargePeriod(DateRange):
    id: str | None = None
    name: str = ""
    amount: Decimal = Field(ge=0)


class TicketPricing(BaseModel):
    mode: Literal["ticket"] = "ticket"
    adult_price: Decimal = Field(ge=0)
    child_price: Decimal | None = Field(default=None, ge=0)


class VehiclePricing(BaseModel):
    mode: Literal["vehicle"] = "vehicle"
    vehicle_options: list[VehicleOption] = Field(min_length=1)
    surcharge_periods: list[SurchargePeriod] = Field(default_factory=list)

    def option(self, option_id: str | None) -> VehicleOption | None:
        if option_id is None:
            return self.vehicle_options[0]
        return next((v for v in self.vehicle_options if v.id == option_id), None)


class TransferPayload(BaseModel):
    category: Literal["transfer"] = "transfer"
    pricing: Annotated[Union[TicketPricing, VehiclePricing], Field(discriminator="mode")]


CostAssignment = Literal["per_person", "total"]


class FlatRatePayload(BaseModel):
    price: Decimal = Field(ge=0)
    secondary_price: Decimal | None = Field(default=None, ge=0)
    cost_assignment: CostAssignment = "per_person"


class MealPayload(FlatRatePayload):
    category: Literal["meal"] = "meal"


class MiscPayload(FlatRatePayload):
    category: Literal["misc"] = "misc"
    cost_assignment: CostAssignment = "total"


CatalogPayload = Annotated[
    Union[HotelPayload, ActivityPayload, TransferPayload, MealPayload, MiscPayload],
    Field(discriminator="category"),
]


class CatalogEntry(BaseModel):
    id: str
    name: str
    province: str | None = None
    currency: str = Field(min_length=3, max_length=3)
    unit_description: str = ""
    notes: str | None = None
    payload: CatalogPayload

    @property
    def category(self) -> str:
        return self.payload.category

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()
