from pydantic import BaseModel, Field

from quotewise.schemas.catalog import CatalogEntry
from quotewise.schemas.itinerary import Itinerary
from quotewise.schemas.rates import ExchangeRate


class QuoteRequest(BaseModel):
    catalog: list[CatalogEntry] = Field(default_factory=list)
    rates: list[ExchangeRate] | None = None  # None → default USD-centric table
    markup_percent: float | None = Field(default=None, ge=0)
    itinerary: Itinerary
