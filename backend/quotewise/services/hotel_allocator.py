"""Hotel allocator — prices multi-night stays night by night against seasonal rates."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from quotewise.exceptions import InvalidConfigurationError, PerNightError
from quotewise.schemas.catalog import HotelPayload, RoomType, SeasonalPrice
from quotewise.schemas.itinerary import RoomBooking

logger = logging.getLogger(__name__)


def latest_start_wins(candidates: list[SeasonalPrice]) -> SeasonalPrice:
    """Pick one of several seasonal prices covering the same night.

    The range with the latest start date wins. Equal starts prefer the range
    ending first; remaining ties keep catalog order.
    """
    ranked = sorted(
        enumerate(candidates),
        key=lambda pair: (-pair[1].start_date.toordinal(), pair[1].end_date, pair[0]),
    )
    return ranked[0][1]


def resolve_seasonal_price(room_type: RoomType, night: date) -> SeasonalPrice | None:
    covering = [sp for sp in room_type.seasonal_prices if sp.contains(night)]
    if not covering:
        return None
    return latest_start_wins(covering)


@dataclass
class OccupancyBlock:
    """Priced block of identical rooms within one stay."""

    room_type_id: str
    room_type_name: str
    num_rooms: int
    nights: int
    extra_bed: bool
    assigned_traveler_ids: list[str]
    total: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "room_type_id": self.room_type_id,
            "room_type_name": self.room_type_name,
            "num_rooms": self.num_rooms,
            "nights": self.nights,
            "extra_bed": self.extra_bed,
            "assigned_traveler_ids": list(self.assigned_traveler_ids),
            "total": float(self.total),
        }


@dataclass
class StayPrice:
    check_in: date
    nights: int
    blocks: list[OccupancyBlock] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((b.total for b in self.blocks), Decimal("0"))


class HotelAllocator:
    """Prices each room booking for every night of a stay."""

    def price_stay(
        self,
        hotel: HotelPayload,
        check_in: date,
        nights: int,
        bookings: list[RoomBooking],
    ) -> StayPrice:
        if nights <= 0:
            raise InvalidConfigurationError(f"Stay must be at least one night, got {nights}")
        if not bookings:
            raise InvalidConfigurationError("No rooms selected for hotel stay")

        stay = StayPrice(check_in=check_in, nights=nights)
        gaps: list[tuple[str, str, date]] = []

        for index, booking in enumerate(bookings, start=1):
            label = booking.id or f"#{index}"
            room_type = hotel.room_type(booking.room_type_id)
            if room_type is None:
                raise InvalidConfigurationError(f"Unknown room type {booking.room_type_id}")
            if booking.num_rooms <= 0:
                raise InvalidConfigurationError(
                    f"Room count for {room_type.name} must be positive, got {booking.num_rooms}"
                )

            block = OccupancyBlock(
                room_type_id=room_type.id,
                room_type_name=room_type.name,
                num_rooms=booking.num_rooms,
                nights=nights,
                extra_bed=booking.extra_bed and room_type.extra_bed_allowed,
                assigned_traveler_ids=list(booking.assigned_traveler_ids),
            )

            for offset in range(nights):
                night = check_in + timedelta(days=offset)
                price = resolve_seasonal_price(room_type, night)
                if price is None:
                    gaps.append((label, room_type.name, night))
                    continue

                nightly = price.rate
                if block.extra_bed and price.extra_bed_rate is not None:
                    nightly += price.extra_bed_rate
                block.total += nightly * booking.num_rooms

            stay.blocks.append(block)

        if gaps:
            raise PerNightError(gaps)

        logger.debug(f"Priced {nights}-night stay from {check_in}: {stay.total}")
        return stay


hotel_allocator = HotelAllocator()
