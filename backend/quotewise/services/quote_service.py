"""Quote service — wires repositories, converter and aggregator for one pricing request."""

import logging

from quotewise.schemas.quote import QuoteRequest
from quotewise.services.cost_aggregator import CostSummary, cost_aggregator
from quotewise.services.currency_service import build_converter
from quotewise.services.repositories import (
    CatalogRepository,
    InMemoryCatalogRepository,
    InMemoryRateRepository,
    RateRepository,
)

logger = logging.getLogger(__name__)


class QuoteService:
    def summarize(
        self,
        itinerary,
        catalog: CatalogRepository,
        rates: RateRepository,
        markup_percent: float | None = None,
    ) -> CostSummary:
        converter = build_converter(rates.list_rates(), markup_percent)
        return cost_aggregator.summarize(itinerary, catalog, converter)

    def summarize_request(self, req: QuoteRequest) -> CostSummary:
        """Price a self-contained quote request (catalog and rates travel with it)."""
        catalog = InMemoryCatalogRepository(req.catalog)
        if req.rates is None:
            rates = InMemoryRateRepository.with_defaults()
        else:
            rates = InMemoryRateRepository(req.rates)

        summary = self.summarize(req.itinerary, catalog, rates, req.markup_percent)
        logger.info(
            f"Quote priced: {len(summary.detailed_items)} items, "
            f"{summary.grand_total} {summary.currency}, {summary.error_count} errors"
        )
        return summary


quote_service = QuoteService()
