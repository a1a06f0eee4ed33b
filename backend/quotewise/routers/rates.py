"""Rates router — resolve a conversion rate between two currencies."""

from fastapi import APIRouter, HTTPException

from quotewise.exceptions import UnresolvableRateError
from quotewise.schemas.rates import ResolveRateRequest
from quotewise.services.currency_service import build_converter
from quotewise.services.repositories import InMemoryRateRepository

router = APIRouter()


@router.post("/resolve")
async def resolve_rate(req: ResolveRateRequest):
    """Base and marked-up rate for one currency pair."""
    repo = InMemoryRateRepository.with_defaults() if req.rates is None else InMemoryRateRepository(req.rates)
    converter = build_converter(repo.list_rates(), req.markup_percent)
    try:
        resolution = converter.resolve(req.from_currency, req.to_currency)
    except UnresolvableRateError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return resolution.to_dict()


@router.get("/defaults")
async def default_rates():
    """The seed USD-centric rate table."""
    rates = InMemoryRateRepository.with_defaults().list_rates()
    return [
        {"from_currency": r.from_currency, "to_currency": r.to_currency, "rate": float(r.rate)}
        for r in rates
    ]
