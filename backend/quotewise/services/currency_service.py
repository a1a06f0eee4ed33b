"""Currency service — resolves conversion rates over a sparse, directed rate table."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from quotewise.config import settings
from quotewise.exceptions import UnresolvableRateError
from quotewise.schemas.rates import ExchangeRate

logger = logging.getLogger(__name__)

ONE = Decimal("1")
ZERO = Decimal("0")


@dataclass(frozen=True)
class RateResolution:
    from_currency: str
    to_currency: str
    base_rate: Decimal
    final_rate: Decimal
    markup_applied: Decimal

    def to_dict(self) -> dict:
        return {
            "from_currency": self.from_currency,
            "to_currency": self.to_currency,
            "base_rate": float(self.base_rate),
            "final_rate": float(self.final_rate),
            "markup_applied": float(self.markup_applied),
        }


class CurrencyConverter:
    """Resolves rates in fixed priority: direct, inverse, then two hops via an intermediate.

    Direct entries are authoritative and always win over a derived path. A zero
    rate on any leg makes the pair unresolvable.
    """

    def __init__(
        self,
        rates: list[ExchangeRate],
        markup_percent: float | Decimal = 0,
        intermediate_currency: str = "USD",
    ):
        markup = Decimal(str(markup_percent))
        if markup < 0:
            raise ValueError("Markup percentage must be a non-negative number")
        self.markup_percent = markup
        self.intermediate_currency = intermediate_currency.upper()
        # Later entries for the same directed pair replace earlier ones
        self._table: dict[tuple[str, str], Decimal] = {
            (r.from_currency, r.to_currency): r.rate for r in rates
        }

    def _leg(self, from_currency: str, to_currency: str) -> Decimal | None:
        """Direct or inverse rate for one leg, or None when neither exists."""
        if from_currency == to_currency:
            return ONE

        direct = self._table.get((from_currency, to_currency))
        if direct is not None:
            if direct == ZERO:
                raise UnresolvableRateError(from_currency, to_currency, "zero rate")
            return direct

        inverse = self._table.get((to_currency, from_currency))
        if inverse is not None:
            if inverse == ZERO:
                raise UnresolvableRateError(from_currency, to_currency, "zero inverse rate")
            return ONE / inverse

        return None

    def base_rate(self, from_currency: str, to_currency: str) -> Decimal:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()

        rate = self._leg(from_currency, to_currency)
        if rate is not None:
            return rate

        via = self.intermediate_currency
        if via in (from_currency, to_currency):
            raise UnresolvableRateError(from_currency, to_currency)

        first = self._leg(from_currency, via)
        if first is None:
            raise UnresolvableRateError(
                from_currency, to_currency, f"no rate between {from_currency} and {via}"
            )
        second = self._leg(via, to_currency)
        if second is None:
            raise UnresolvableRateError(
                from_currency, to_currency, f"no rate between {via} and {to_currency}"
            )
        return first * second

    def resolve(self, from_currency: str, to_currency: str) -> RateResolution:
        from_currency = from_currency.upper()
        to_currency = to_currency.upper()

        if from_currency == to_currency:
            return RateResolution(from_currency, to_currency, ONE, ONE, ZERO)

        base = self.base_rate(from_currency, to_currency)
        final = base * (ONE + self.markup_percent / Decimal("100"))
        return RateResolution(from_currency, to_currency, base, final, self.markup_percent)

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """Convert an amount using the marked-up rate."""
        return amount * self.resolve(from_currency, to_currency).final_rate


def build_converter(
    rates: list[ExchangeRate],
    markup_percent: float | None = None,
) -> CurrencyConverter:
    """Create a converter with configured defaults for markup and intermediate currency."""
    markup = settings.default_markup_percent if markup_percent is None else markup_percent
    logger.debug(
        f"Building converter: {len(rates)} rates, markup {markup}%, via {settings.intermediate_currency}"
    )
    return CurrencyConverter(
        rates,
        markup_percent=markup,
        intermediate_currency=settings.intermediate_currency,
    )
