"""Metrics Routes - per-day, per-community counters of one user over a date range."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from octopus.core.errors import BusinessRuleError
from octopus.infrastructure.database import get_db
from octopus.services.user_metrics import aggregate_user_metrics

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


@router.get("/users")
async def user_metrics(
    address: str = Query(..., min_length=1),
    from_date: date = Query(..., alias="from"),
    to_date: date = Query(..., alias="to"),
    db: AsyncSession = Depends(get_db),
):
    if from_date > to_date:
        raise BusinessRuleError("'from' must not be after 'to'", "INVALID_RANGE")
    return {
        "address": address,
        "metrics": await aggregate_user_metrics(db, address, from_date, to_date),
    }
