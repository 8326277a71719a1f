"""
Reporting endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select

from fieldforce.api.deps import get_store, require_manager
from fieldforce.core.exceptions import ValidationError
from fieldforce.db.store import FieldStore
from fieldforce.models.user import User
from fieldforce.schemas.report import DailySummaryResponse, HealthResponse
from fieldforce.services.reports import build_daily_summary
from fieldforce.utils.datetime_utils import parse_date, utc_now

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)


# ── Daily Summary ──────────────────────────────────────────────────
@router.get("/reports/daily-summary", response_model=DailySummaryResponse)
async def daily_summary(
    date: str | None = Query(default=None),
    employee_id: str | None = Query(default=None),
    store: FieldStore = Depends(get_store),
    manager: User = Depends(require_manager),
) -> DailySummaryResponse:
    """Per-employee and team totals for the manager's team on one day."""
    if not date:
        raise ValidationError("Date parameter is required (format: YYYY-MM-DD)")
    day = parse_date(date)
    if day is None:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")

    employee_filter = None
    if employee_id:
        if not (employee_id.isascii() and employee_id.isdigit()):
            raise ValidationError("Invalid employee_id parameter")
        employee_filter = int(employee_id)

    return await build_daily_summary(store, manager.id, day, employee_id=employee_filter)


# ── Health ─────────────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(store: FieldStore = Depends(get_store)) -> HealthResponse:
    """Public health check: database connectivity."""
    db_ok = False
    try:
        await store.session.execute(select(1))
        db_ok = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    return HealthResponse(status="ok" if db_ok else "degraded", db=db_ok, timestamp=utc_now())
