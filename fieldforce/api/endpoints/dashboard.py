"""
Dashboard endpoints — manager team overview and employee home screen.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from fieldforce.api.deps import get_current_user, get_store, require_manager
from fieldforce.db.store import FieldStore
from fieldforce.models.user import User
from fieldforce.schemas.report import (ChartDataResponse,
                                       EmployeeDashboardResponse,
                                       ManagerStatsResponse)
from fieldforce.services import reports
from fieldforce.utils.datetime_utils import utc_now

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ManagerStatsResponse)
async def manager_stats(
    store: FieldStore = Depends(get_store),
    manager: User = Depends(require_manager),
) -> ManagerStatsResponse:
    """Team size, today's team check-ins and open visit count."""
    return await reports.manager_stats(store, manager, utc_now())


@router.get("/stats/charts", response_model=ChartDataResponse)
async def manager_chart_data(
    response: Response,
    store: FieldStore = Depends(get_store),
    manager: User = Depends(require_manager),
) -> ChartDataResponse:
    data = await reports.manager_chart_data(store, manager, utc_now())
    response.headers["Cache-Control"] = "private, max-age=60"
    return data


@router.get("/employee", response_model=EmployeeDashboardResponse)
async def employee_dashboard(
    store: FieldStore = Depends(get_store),
    user: User = Depends(get_current_user),
) -> EmployeeDashboardResponse:
    """Today's visits, assigned clients and trailing 7-day stats."""
    return await reports.employee_dashboard(store, user.id, utc_now())
