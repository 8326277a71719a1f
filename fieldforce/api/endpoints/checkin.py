"""
Check-in endpoints — the calling user checks in / out at assigned clients.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from fieldforce.api.deps import get_current_user, get_store
from fieldforce.core.exceptions import ValidationError
from fieldforce.db.store import FieldStore
from fieldforce.models.client import Client
from fieldforce.models.user import User
from fieldforce.schemas.checkin import (CheckinCreate, CheckinCreateResponse,
                                        CheckinRead, CheckoutResponse)
from fieldforce.schemas.client import ClientRead
from fieldforce.services.checkins import CheckinService
from fieldforce.utils.datetime_utils import parse_date

router = APIRouter(prefix="/checkin", tags=["checkin"])


def _parse_day(value: str | None, name: str) -> date | None:
    if not value:
        return None
    day = parse_date(value)
    if day is None:
        raise ValidationError(f"Invalid {name} format. Use YYYY-MM-DD")
    return day


def get_checkin_service(store: FieldStore = Depends(get_store)) -> CheckinService:
    return CheckinService(store)


@router.get("/clients", response_model=list[ClientRead])
async def assigned_clients(
    store: FieldStore = Depends(get_store),
    user: User = Depends(get_current_user),
) -> list[Client]:
    """Clients the caller is assigned to."""
    return await store.list_assigned_clients(user.id)


@router.get("/active", response_model=CheckinRead | None)
async def active_checkin(
    store: FieldStore = Depends(get_store),
    user: User = Depends(get_current_user),
) -> CheckinRead | None:
    """The caller's open check-in, or ``null``."""
    row = await store.get_active_checkin_detail(user.id)
    if row is None:
        return None
    checkin, client = row
    return CheckinRead.from_row(checkin, client)


@router.post("", response_model=CheckinCreateResponse, status_code=201)
async def create_checkin(
    body: CheckinCreate,
    service: CheckinService = Depends(get_checkin_service),
    store: FieldStore = Depends(get_store),
    user: User = Depends(get_current_user),
) -> CheckinCreateResponse:
    result = await service.create_checkin(
        user.id,
        body.client_id,
        latitude=body.latitude,
        longitude=body.longitude,
        notes=body.notes,
    )
    checkin, client = await store.get_checkin_detail(result.checkin.id)
    return CheckinCreateResponse(
        id=checkin.id,
        message="Checked in successfully",
        distance_from_client=checkin.distance_from_client,
        distance_warning=result.distance_warning,
        checkin=CheckinRead.from_row(checkin, client),
    )


@router.put("/checkout", response_model=CheckoutResponse)
async def checkout(
    service: CheckinService = Depends(get_checkin_service),
    store: FieldStore = Depends(get_store),
    user: User = Depends(get_current_user),
) -> CheckoutResponse:
    closed = await service.checkout(user.id)
    checkin, client = await store.get_checkin_detail(closed.id)
    return CheckoutResponse(
        message="Checked out successfully",
        checkin=CheckinRead.from_row(checkin, client),
    )


@router.get("/history", response_model=list[CheckinRead])
async def checkin_history(
    start: str | None = Query(default=None, alias="start_date"),
    end: str | None = Query(default=None, alias="end_date"),
    store: FieldStore = Depends(get_store),
    user: User = Depends(get_current_user),
) -> list[CheckinRead]:
    """The caller's check-ins between two inclusive dates, newest first."""
    start_date = _parse_day(start, "start_date")
    end_date = _parse_day(end, "end_date")
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must not be after end_date")
    rows = await store.list_checkins(user.id, start_date=start_date, end_date=end_date)
    return [CheckinRead.from_row(checkin, client) for checkin, client in rows]
