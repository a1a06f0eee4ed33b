"""Line item resolver — prices one itinerary item against its catalog entry."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from quotewise.data.currency import format_price
from quotewise.exceptions import (
    CapacityExceededError,
    InvalidConfigurationError,
    PricingError,
    SchedulingConflictError,
)
from quotewise.schemas.catalog import (
    ActivityPayload,
    CatalogEntry,
    FlatRatePayload,
    HotelPayload,
    SurchargePeriod,
    TicketPricing,
    TransferPayload,
    VehiclePricing,
)
from quotewise.services.availability import package_day_status
from quotewise.services.hotel_allocator import OccupancyBlock, hotel_allocator

logger = logging.getLogger(__name__)

# How the aggregator attributes an item's cost to travelers
PER_TRAVELER = "per_traveler"  # each participant pays their unit price
SPLIT = "split"  # total divided evenly among participants
SHARED = "shared"  # one amount, not attributed to travelers
ROOMS = "rooms"  # each room block divided among its occupants


@dataclass
class RequestContext:
    service_date: date
    adults: int
    children: int

    @property
    def travelers(self) -> int:
        return self.adults + self.children


@dataclass
class PricedLineItem:
    category: str
    currency: str
    total: Decimal
    allocation: str
    configuration: str
    adult_unit: Decimal = Decimal("0")
    child_unit: Decimal = Decimal("0")
    blocks: list[OccupancyBlock] = field(default_factory=list)


def _child_or_adult(child_price: Decimal | None, adult_price: Decimal) -> Decimal:
    return adult_price if child_price is None else child_price


class LineItemPricer(ABC):
    @abstractmethod
    def describe(self, entry: CatalogEntry, item, context: RequestContext) -> str:
        """Human-readable configuration, available even when pricing fails."""

    @abstractmethod
    def price(self, entry: CatalogEntry, item, context: RequestContext) -> PricedLineItem:
        ...


class HotelPricer(LineItemPricer):
    def describe(self, entry, item, context) -> str:
        hotel: HotelPayload = entry.payload
        nights = item.checkout_day - item.day
        rooms = []
        for booking in item.room_bookings:
            room_type = hotel.room_type(booking.room_type_id)
            name = room_type.name if room_type else booking.room_type_id
            bed = booking.extra_bed and room_type is not None and room_type.extra_bed_allowed
            rooms.append(f"{booking.num_rooms}x {name}{' +bed' if bed else ''}")
        return (
            f"In: Day {item.day}, Out: Day {item.checkout_day} ({nights}n); "
            f"Rooms: {', '.join(rooms) or 'none'}"
        )

    def price(self, entry, item, context) -> PricedLineItem:
        hotel: HotelPayload = entry.payload
        nights = item.checkout_day - item.day
        stay = hotel_allocator.price_stay(hotel, context.service_date, nights, item.room_bookings)
        return PricedLineItem(
            category="hotel",
            currency=entry.currency,
            total=stay.total,
            allocation=ROOMS,
            configuration=self.describe(entry, item, context),
            blocks=stay.blocks,
        )


class ActivityPricer(LineItemPricer):
    def describe(self, entry, item, context) -> str:
        package = entry.payload.package(item.package_id)
        if package is None:
            return f"Pkg: {item.package_id}"
        adult_price = package.adult_price
        child_price = _child_or_adult(package.child_price, adult_price)
        return (
            f"Pkg: {package.name}; Ad: {format_price(adult_price, entry.currency)}, "
            f"Ch: {format_price(child_price, entry.currency)}"
        )

    def price(self, entry, item, context) -> PricedLineItem:
        activity: ActivityPayload = entry.payload
        package = activity.package(item.package_id)
        if package is None:
            raise InvalidConfigurationError(f"Unknown package {item.package_id} for {entry.name}")

        availability = package_day_status(package, context.service_date)
        if not availability.is_open:
            raise SchedulingConflictError(
                package.name, context.service_date, availability.status.value, availability.reason,
            )

        adult_price = package.adult_price
        child_price = _child_or_adult(package.child_price, adult_price)
        return PricedLineItem(
            category="activity",
            currency=entry.currency,
            total=context.adults * adult_price + context.children * child_price,
            allocation=PER_TRAVELER,
            configuration=self.describe(entry, item, context),
            adult_unit=adult_price,
            child_unit=child_price,
        )


def _surcharges_on(pricing: VehiclePricing, day: date) -> list[SurchargePeriod]:
    # Overlapping periods accumulate
    return [p for p in pricing.surcharge_periods if p.contains(day)]


class TransferPricer(LineItemPricer):
    def describe(self, entry, item, context) -> str:
        pricing = entry.payload.pricing
        if isinstance(pricing, TicketPricing):
            adult_price = pricing.adult_price
            child_price = _child_or_adult(pricing.child_price, adult_price)
            return (
                f"Mode: ticket; Ad: {format_price(adult_price, entry.currency)}, "
                f"Ch: {format_price(child_price, entry.currency)}"
            )

        option = pricing.option(item.vehicle_option_id)
        if option is None:
            return f"Mode: vehicle; Option: {item.vehicle_option_id}; #Veh: {item.vehicles}"
        configuration = (
            f"Mode: vehicle; Type: {option.vehicle_type}; #Veh: {item.vehicles}; "
            f"Cost/V: {format_price(option.price, entry.currency)}"
        )
        surcharges = _surcharges_on(pricing, context.service_date)
        if surcharges:
            names = ", ".join(p.name or p.start_date.isoformat() for p in surcharges)
            configuration += f"; Surcharge: {names}"
        return configuration

    def price(self, entry, item, context) -> PricedLineItem:
        transfer: TransferPayload = entry.payload
        if isinstance(transfer.pricing, TicketPricing):
            return self._price_tickets(entry, transfer.pricing, item, context)
        return self._price_vehicle(entry, transfer.pricing, item, context)

    def _price_tickets(self, entry, pricing: TicketPricing, item, context) -> PricedLineItem:
        adult_price = pricing.adult_price
        child_price = _child_or_adult(pricing.child_price, adult_price)
        return PricedLineItem(
            category="transfer",
            currency=entry.currency,
            total=context.adults * adult_price + context.children * child_price,
            allocation=PER_TRAVELER,
            configuration=self.describe(entry, item, context),
            adult_unit=adult_price,
            child_unit=child_price,
        )

    def _price_vehicle(self, entry, pricing: VehiclePricing, item, context) -> PricedLineItem:
        option = pricing.option(item.vehicle_option_id)
        if option is None:
            raise InvalidConfigurationError(
                f"Unknown vehicle option {item.vehicle_option_id} for {entry.name}"
            )
        if item.vehicles <= 0:
            raise InvalidConfigurationError(f"Vehicle count must be positive, got {item.vehicles}")

        capacity = option.max_passengers * item.vehicles
        if context.travelers > capacity:
            raise CapacityExceededError(option.vehicle_type, context.travelers, capacity)

        surcharges = _surcharges_on(pricing, context.service_date)
        per_vehicle = option.price + sum((p.amount for p in surcharges), Decimal("0"))
        return PricedLineItem(
            category="transfer",
            currency=entry.currency,
            total=per_vehicle * item.vehicles,
            allocation=SHARED,
            configuration=self.describe(entry, item, context),
        )


class FlatRatePricer(LineItemPricer):
    """Meals and misc items: per-person unit price or one total."""

    def describe(self, entry, item, context) -> str:
        payload: FlatRatePayload = entry.payload
        return (
            f"Assign: {payload.cost_assignment}, "
            f"Cost: {format_price(payload.price, entry.currency)}, Qty: {item.quantity}"
        )

    def price(self, entry, item, context) -> PricedLineItem:
        payload: FlatRatePayload = entry.payload
        quantity = item.quantity
        configuration = self.describe(entry, item, context)

        if payload.cost_assignment == "total":
            return PricedLineItem(
                category=payload.category,
                currency=entry.currency,
                total=payload.price * quantity,
                allocation=SPLIT,
                configuration=configuration,
            )

        adult_unit = payload.price * quantity
        child_unit = _child_or_adult(payload.secondary_price, payload.price) * quantity
        return PricedLineItem(
            category=payload.category,
            currency=entry.currency,
            total=context.adults * adult_unit + context.children * child_unit,
            allocation=PER_TRAVELER,
            configuration=configuration,
            adult_unit=adult_unit,
            child_unit=child_unit,
        )


PRICER_MAP: dict[str, type[LineItemPricer]] = {
    "hotel": HotelPricer,
    "activity": ActivityPricer,
    "transfer": TransferPricer,
    "meal": FlatRatePricer,
    "misc": FlatRatePricer,
}


def _with_province(entry: CatalogEntry, configuration: str) -> str:
    if entry.province:
        return f"Prov: {entry.province}; {configuration}"
    return configuration


def price_line_item(entry: CatalogEntry, item, context: RequestContext) -> PricedLineItem:
    """Price one itinerary item. Raises a PricingError subclass when it cannot be priced.

    A raised error carries the item's configuration text so failed items still
    describe what was requested.
    """
    if item.type != entry.category:
        raise InvalidConfigurationError(
            f"Item {item.id} is a {item.type} but catalog entry {entry.id} is a {entry.category}",
            configuration=_with_province(entry, f"Service: {entry.name}"),
        )

    pricer = PRICER_MAP[entry.category]()
    try:
        priced = pricer.price(entry, item, context)
    except PricingError as exc:
        exc.configuration = _with_province(entry, pricer.describe(entry, item, context))
        raise
    priced.configuration = _with_province(entry, priced.configuration)
    return priced
