"""Pricing errors raised while resolving a single line item."""

from datetime import date


class PricingError(Exception):
    code = "pricing_error"

    def __init__(self, message: str, configuration: str = ""):
        self.message = message
        self.configuration = configuration  # filled in by the line item resolver
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class UnresolvableRateError(PricingError):
    code = "unresolvable"

    def __init__(self, from_currency: str, to_currency: str, reason: str | None = None):
        self.from_currency = from_currency
        self.to_currency = to_currency
        message = f"No exchange rate path from {from_currency} to {to_currency}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PerNightError(PricingError):
    """One or more booked nights have no covering seasonal price.

    Each gap is (booking label, room type name, night); the label is the
    booking id, or its 1-based position when the booking has no id.
    """

    code = "per_night"

    def __init__(self, gaps: list[tuple[str, str, date]]):
        self.gaps = gaps
        listed = ", ".join(
            f"{room} (booking {label}) on {night.isoformat()}" for label, room, night in gaps
        )
        super().__init__(f"No seasonal rate for {listed}")


class SchedulingConflictError(PricingError):
    code = "scheduling_conflict"

    def __init__(self, package_name: str, service_date: date, status: str, reason: str):
        self.package_name = package_name
        self.service_date = service_date
        self.status = status
        super().__init__(f"{package_name} is not available on {service_date.isoformat()} ({reason})")


class CapacityExceededError(PricingError):
    code = "capacity_exceeded"

    def __init__(self, vehicle_type: str, travelers: int, capacity: int):
        self.travelers = travelers
        self.capacity = capacity
        super().__init__(f"{travelers} travelers exceed {vehicle_type} capacity of {capacity}")


class InvalidConfigurationError(PricingError):
    code = "invalid_configuration"


class MissingCatalogEntryError(PricingError):
    code = "missing_catalog_entry"

    def __init__(self, service_id: str):
        self.service_id = service_id
        super().__init__(f"Catalog entry {service_id} not found")
