"""Quotes router — price an itinerary and export the breakdown."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from quotewise.schemas.quote import QuoteRequest
from quotewise.services.export_service import export_service
from quotewise.services.quote_service import quote_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _summarize(req: QuoteRequest):
    try:
        return quote_service.summarize_request(req)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/summary")
async def quote_summary(req: QuoteRequest):
    """Price every item, convert to the trip currency and total per traveler."""
    return _summarize(req).to_dict()


@router.post("/export/csv")
async def export_quote_csv(req: QuoteRequest):
    """Download the cost breakdown as CSV."""
    summary = _summarize(req)
    content = export_service.generate_summary_csv(summary, req.itinerary)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=quote.csv"},
    )


@router.post("/export/pdf")
async def export_quote_pdf(req: QuoteRequest):
    """Download the cost breakdown as PDF."""
    summary = _summarize(req)
    pdf_bytes = export_service.generate_summary_pdf(summary, req.itinerary)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=quote.pdf"},
    )
