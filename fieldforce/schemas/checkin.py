"""Pydantic schemas for check-in / checkout."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt, field_validator, model_validator

from fieldforce.core.config import settings
from fieldforce.models.checkin import Checkin
from fieldforce.models.client import Client
from fieldforce.models.user import User
from fieldforce.services.geo import is_valid_latitude, is_valid_longitude
from fieldforce.utils.datetime_utils import ensure_utc


class CheckinCreate(BaseModel):
    client_id: StrictInt = Field(gt=0)
    latitude: float | None = None
    longitude: float | None = None
    notes: str | None = Field(default=None, max_length=settings.NOTES_MAX_LENGTH)

    @field_validator("latitude")
    @classmethod
    def _latitude(cls, v: float | None) -> float | None:
        if v is not None and not is_valid_latitude(v):
            raise ValueError("Invalid latitude value. Must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def _longitude(cls, v: float | None) -> float | None:
        if v is not None and not is_valid_longitude(v):
            raise ValueError("Invalid longitude value. Must be between -180 and 180")
        return v

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def _coordinates_together(self) -> "CheckinCreate":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class CheckinRead(BaseModel):
    id: int
    employee_id: int
    client_id: int
    checkin_time: datetime
    checkout_time: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    distance_from_client: float | None = None
    notes: str | None = None
    status: str
    client_name: str | None = None  # joined from clients
    client_address: str | None = None
    employee_name: str | None = None  # joined from users

    model_config = {"from_attributes": True}

    @field_validator("checkin_time", "checkout_time")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @classmethod
    def from_row(
        cls,
        checkin: Checkin,
        client: Client | None = None,
        employee: User | None = None,
    ) -> "CheckinRead":
        """Build from a check-in plus optionally joined client / employee."""
        data = cls.model_validate(checkin)
        if client is not None:
            data.client_name = client.name
            data.client_address = client.address
        if employee is not None:
            data.employee_name = employee.name
        return data


class CheckinCreateResponse(BaseModel):
    id: int
    message: str
    distance_from_client: float | None
    distance_warning: str | None
    checkin: CheckinRead


class CheckoutResponse(BaseModel):
    message: str
    checkin: CheckinRead
