"""Catalog and rate repositories — read-only snapshots handed to the pricing engine."""

from abc import ABC, abstractmethod

from quotewise.data.currency import default_rate_rows
from quotewise.schemas.catalog import CatalogEntry
from quotewise.schemas.rates import ExchangeRate


class CatalogRepository(ABC):
    @abstractmethod
    def get(self, entry_id: str) -> CatalogEntry | None:
        ...

    @abstractmethod
    def list_entries(self) -> list[CatalogEntry]:
        ...


class RateRepository(ABC):
    @abstractmethod
    def list_rates(self) -> list[ExchangeRate]:
        ...


class InMemoryCatalogRepository(CatalogRepository):
    def __init__(self, entries: list[CatalogEntry]):
        self._entries = list(entries)
        self._by_id: dict[str, CatalogEntry] = {}
        for entry in self._entries:
            if entry.id in self._by_id:
                raise ValueError(f"Duplicate catalog entry id {entry.id}")
            self._by_id[entry.id] = entry

    def get(self, entry_id: str) -> CatalogEntry | None:
        return self._by_id.get(entry_id)

    def list_entries(self) -> list[CatalogEntry]:
        return list(self._entries)


class InMemoryRateRepository(RateRepository):
    def __init__(self, rates: list[ExchangeRate]):
        self._rates = list(rates)

    def list_rates(self) -> list[ExchangeRate]:
        return list(self._rates)

    @classmethod
    def with_defaults(cls) -> "InMemoryRateRepository":
        """Repository seeded with the USD-centric default table."""
        return cls([ExchangeRate(**row) for row in default_rate_rows()])
