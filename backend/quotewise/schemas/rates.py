from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator


class ExchangeRate(BaseModel):
    """1 unit of ``from_currency`` = ``rate`` units of ``to_currency``."""

    id: str | None = None
    from_currency: str = Field(min_length=3, max_length=3)
    to_currency: str = Field(min_length=3, max_length=3)
    rate: Decimal = Field(ge=0)

    @field_validator("from_currency", "to_currency")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _distinct_pair(self):
        if self.from_currency == self.to_currency:
            raise ValueError("Cannot set an exchange rate from a currency to itself")
        return self


class ResolveRateRequest(BaseModel):
    rates: list[ExchangeRate] | None = None
    from_currency: str
    to_currency: str
    markup_percent: float | None = Field(default=None, ge=0)
