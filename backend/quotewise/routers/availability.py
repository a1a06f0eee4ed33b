"""Availability router — the same day checks pricing uses, for calendar views."""

from datetime import date

from fastapi import APIRouter
from pydantic import BaseModel, Field

from quotewise.schemas.catalog import ActivityPackage
from quotewise.services.availability import availability_calendar, package_day_status

router = APIRouter()


class DayStatusRequest(BaseModel):
    package: ActivityPackage
    day: date


class CalendarRequest(BaseModel):
    package: ActivityPackage
    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)


@router.post("/status")
async def day_status(req: DayStatusRequest):
    return package_day_status(req.package, req.day).to_dict()


@router.post("/calendar")
async def month_calendar(req: CalendarRequest):
    """Status of every day in the month for one package."""
    days = availability_calendar(req.package, req.year, req.month)
    return {
        "package_id": req.package.id,
        "year": req.year,
        "month": req.month,
        "days": [d.to_dict() for d in days],
    }
