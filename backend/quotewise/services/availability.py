"""Availability — decides whether a package can be booked on a calendar date.

The same check backs both pricing and the month calendar, so anything shown as
bookable is exactly what the pricing engine accepts.
"""

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from quotewise.schemas.catalog import ActivityPackage

# 0 = Sunday, matching the catalog's closed_weekdays convention
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


class DayStatus(str, Enum):
    OPEN = "open"
    CLOSED_WEEKDAY = "closed_weekday"
    CLOSED_SPECIFIC = "closed_specific"
    INVALID_RANGE = "invalid_range"


@dataclass(frozen=True)
class DayAvailability:
    day: date
    status: DayStatus
    reason: str

    @property
    def is_open(self) -> bool:
        return self.status is DayStatus.OPEN

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), "status": self.status.value, "reason": self.reason}


def sunday_based_weekday(day: date) -> int:
    """Weekday number with Sunday = 0 … Saturday = 6."""
    return (day.weekday() + 1) % 7


def day_status(
    day: date,
    validity_start: date | None = None,
    validity_end: date | None = None,
    closed_weekdays: Iterable[int] = (),
    specific_closed_dates: Iterable[date] = (),
) -> DayAvailability:
    """Classify a date. First match wins: range, specific date, weekday, open."""
    if validity_start and validity_end:
        if not validity_start <= day <= validity_end:
            return DayAvailability(day, DayStatus.INVALID_RANGE, "Outside validity")
    elif validity_start and day < validity_start:
        return DayAvailability(day, DayStatus.INVALID_RANGE, "Before validity start")
    elif validity_end and day > validity_end:
        return DayAvailability(day, DayStatus.INVALID_RANGE, "After validity end")

    if day in set(specific_closed_dates):
        return DayAvailability(day, DayStatus.CLOSED_SPECIFIC, "Specifically closed")

    weekday = sunday_based_weekday(day)
    if weekday in set(closed_weekdays):
        return DayAvailability(day, DayStatus.CLOSED_WEEKDAY, f"Closed ({WEEKDAY_LABELS[weekday]})")

    return DayAvailability(day, DayStatus.OPEN, "Open")


def package_day_status(package: ActivityPackage, day: date) -> DayAvailability:
    return day_status(
        day,
        validity_start=package.validity_start,
        validity_end=package.validity_end,
        closed_weekdays=package.closed_weekdays,
        specific_closed_dates=package.specific_closed_dates,
    )


def availability_calendar(package: ActivityPackage, year: int, month: int) -> list[DayAvailability]:
    """Status of every day in a month for one package."""
    _, days_in_month = calendar.monthrange(year, month)
    return [package_day_status(package, date(year, month, d)) for d in range(1, days_in_month + 1)]
