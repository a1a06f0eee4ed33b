"""Currency utilities — default USD-centric rate table and price formatting."""

from decimal import Decimal

# Seed rates used when a caller supplies no rate table (1 USD = rate units)
DEFAULT_USD_RATES: dict[str, str] = {
    "THB": "36.50",
    "MYR": "4.70",
    "SGD": "1.35",
    "VND": "25000",
    "EUR": "0.92",
    "GBP": "0.79",
    "JPY": "157.00",
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥",
    "THB": "฿", "SGD": "S$", "MYR": "RM", "VND": "₫",
}

# Currencies quoted without minor units
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "VND"})


def default_rate_rows() -> list[dict]:
    """Return the seed table as plain rate rows (USD → currency)."""
    return [
        {"from_currency": "USD", "to_currency": code, "rate": Decimal(rate)}
        for code, rate in DEFAULT_USD_RATES.items()
    ]


def format_price(amount: Decimal | float, currency: str = "USD") -> str:
    """Format a price with currency symbol for display."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    if currency in ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{round(amount):,}"
    return f"{symbol}{float(amount):,.2f}"
