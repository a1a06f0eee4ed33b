"""Cost aggregator — prices a whole itinerary into a display-currency summary.

A failing item never aborts the run: its error is recorded on its detail
record and it is left out of every total, so draft itineraries still price.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from quotewise.config import settings
from quotewise.exceptions import MissingCatalogEntryError, PricingError
from quotewise.schemas.itinerary import Itinerary, Traveler
from quotewise.services.currency_service import CurrencyConverter, RateResolution
from quotewise.services.line_item_resolver import (
    PER_TRAVELER,
    ROOMS,
    SPLIT,
    PricedLineItem,
    RequestContext,
    price_line_item,
)
from quotewise.services.repositories import CatalogRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _money(amount: Decimal, places: int) -> Decimal:
    return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


@dataclass
class DetailedSummaryItem:
    id: str
    type: str
    day: int
    name: str
    configuration: str
    excluded_travelers: str
    note: str | None = None
    province: str | None = None
    native_currency: str | None = None
    native_total: Decimal = ZERO
    rate: RateResolution | None = None
    adult_cost: Decimal = ZERO
    child_cost: Decimal = ZERO
    total_cost: Decimal = ZERO
    traveler_shares: dict[str, Decimal] = field(default_factory=dict)
    occupancy: list[dict] = field(default_factory=list)
    error: dict | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "day": self.day,
            "name": self.name,
            "note": self.note,
            "province": self.province,
            "configuration": self.configuration,
            "excluded_travelers": self.excluded_travelers,
            "native_currency": self.native_currency,
            "native_total": float(self.native_total),
            "rate": self.rate.to_dict() if self.rate else None,
            "adult_cost": float(self.adult_cost),
            "child_cost": float(self.child_cost),
            "total_cost": float(self.total_cost),
            "traveler_shares": {k: float(v) for k, v in self.traveler_shares.items()},
            "occupancy": self.occupancy,
            "error": self.error,
        }


@dataclass
class CostSummary:
    currency: str
    grand_total: Decimal = ZERO
    per_person_totals: dict[str, Decimal] = field(default_factory=dict)
    day_totals: dict[int, Decimal] = field(default_factory=dict)
    detailed_items: list[DetailedSummaryItem] = field(default_factory=list)
    budget: Decimal | None = None

    @property
    def remaining_budget(self) -> Decimal | None:
        if self.budget is None:
            return None
        return self.budget - self.grand_total

    @property
    def over_budget(self) -> bool:
        return self.budget is not None and self.grand_total > self.budget

    @property
    def error_count(self) -> int:
        return sum(1 for item in self.detailed_items if item.error)

    def to_dict(self) -> dict:
        remaining = self.remaining_budget
        return {
            "currency": self.currency,
            "grand_total": float(self.grand_total),
            "per_person_totals": {k: float(v) for k, v in self.per_person_totals.items()},
            "day_totals": {str(k): float(v) for k, v in self.day_totals.items()},
            "detailed_items": [item.to_dict() for item in self.detailed_items],
            "budget": float(self.budget) if self.budget is not None else None,
            "remaining_budget": float(remaining) if remaining is not None else None,
            "over_budget": self.over_budget,
            "error_count": self.error_count,
        }


def allocate_shares(
    priced: PricedLineItem,
    participants: list[Traveler],
    excluded_ids: frozenset[str],
    roster_ids: set[str],
) -> dict[str, Decimal]:
    """Attribute a priced item's native cost to individual travelers."""
    if priced.allocation == PER_TRAVELER:
        return {
            t.id: priced.adult_unit if t.type == "adult" else priced.child_unit
            for t in participants
        }

    if priced.allocation == SPLIT:
        if not participants or priced.total == ZERO:
            return {}
        share = priced.total / len(participants)
        return {t.id: share for t in participants}

    if priced.allocation == ROOMS:
        shares: dict[str, Decimal] = {}
        in_rooms: set[str] = set()
        pool = ZERO
        for block in priced.blocks:
            occupants = [
                tid for tid in dict.fromkeys(block.assigned_traveler_ids)
                if tid in roster_ids and tid not in excluded_ids
            ]
            if not occupants:
                pool += block.total
                continue
            per_occupant = block.total / len(occupants)
            for tid in occupants:
                shares[tid] = shares.get(tid, ZERO) + per_occupant
            in_rooms.update(occupants)

        if pool > ZERO:
            # Rooms with nobody assigned fall to participants not yet in a room
            payers = [t.id for t in participants if t.id not in in_rooms] or [t.id for t in participants]
            if payers:
                per_payer = pool / len(payers)
                for tid in payers:
                    shares[tid] = shares.get(tid, ZERO) + per_payer
        return shares

    # Shared vehicle costs are not attributed to travelers
    return {}


class CostAggregator:
    """Walks an itinerary day by day and sums priced items in the display currency."""

    def summarize(
        self,
        itinerary: Itinerary,
        catalog: CatalogRepository,
        converter: CurrencyConverter,
        money_places: int | None = None,
    ) -> CostSummary:
        places = settings.money_places if money_places is None else money_places
        trip = itinerary.settings
        display_currency = trip.currency
        travelers = itinerary.travelers
        roster = {t.id: t for t in travelers}

        summary = CostSummary(currency=display_currency, budget=trip.budget)
        per_person = {t.id: ZERO for t in travelers}
        day_totals: dict[int, Decimal] = {}
        grand_total = ZERO

        for item in itinerary.iter_items():
            excluded = item.excluded_traveler_ids
            participants = [t for t in travelers if t.id not in excluded]
            detail = DetailedSummaryItem(
                id=item.id,
                type=item.type,
                day=item.day,
                name=item.name,
                note=item.note,
                configuration="",
                excluded_travelers=", ".join(t.label for t in travelers if t.id in excluded) or "None",
            )
            summary.detailed_items.append(detail)
            day_totals.setdefault(item.day, ZERO)

            context = RequestContext(
                service_date=trip.date_of_day(item.day),
                adults=sum(1 for t in participants if t.type == "adult"),
                children=sum(1 for t in participants if t.type == "child"),
            )

            try:
                entry = catalog.get(item.service_id)
                if entry is None:
                    raise MissingCatalogEntryError(item.service_id)
                detail.province = entry.province
                detail.native_currency = entry.currency
                priced = price_line_item(entry, item, context)
                detail.configuration = priced.configuration
                rate = converter.resolve(entry.currency, display_currency)
            except PricingError as exc:
                detail.configuration = detail.configuration or exc.configuration or f"Service: {item.service_id}"
                detail.error = exc.to_dict()
                continue

            native_shares = allocate_shares(priced, participants, excluded, set(roster))
            shares = {
                tid: converter.convert(amount, entry.currency, display_currency)
                for tid, amount in native_shares.items()
            }
            total = converter.convert(priced.total, entry.currency, display_currency)

            detail.native_total = _money(priced.total, places)
            detail.rate = rate
            detail.total_cost = _money(total, places)
            detail.adult_cost = _money(
                sum((v for tid, v in shares.items() if roster[tid].type == "adult"), ZERO), places
            )
            detail.child_cost = _money(
                sum((v for tid, v in shares.items() if roster[tid].type == "child"), ZERO), places
            )
            detail.traveler_shares = {tid: _money(v, places) for tid, v in shares.items()}
            detail.occupancy = [block.to_dict() for block in priced.blocks]

            grand_total += total
            day_totals[item.day] += total
            for tid, amount in shares.items():
                per_person[tid] += amount

        summary.grand_total = _money(grand_total, places)
        summary.per_person_totals = {tid: _money(v, places) for tid, v in per_person.items()}
        summary.day_totals = {day: _money(v, places) for day, v in sorted(day_totals.items())}

        logger.debug(
            f"Summarized {len(summary.detailed_items)} items in {display_currency}: "
            f"total {summary.grand_total}, {summary.error_count} with errors"
        )
        return summary


cost_aggregator = CostAggregator()
