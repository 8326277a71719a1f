"""Pydantic schemas for clients and assignments."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, StrictInt, field_validator

from fieldforce.services.geo import is_valid_latitude, is_valid_longitude


class ClientCreate(BaseModel):
    name: str
    address: str
    latitude: float | None = None
    longitude: float | None = None
    contact_person: str | None = Field(default=None, max_length=100)
    contact_phone: str | None = Field(default=None, max_length=30)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Client name is required")
        if len(v) > 100:
            raise ValueError("Client name cannot exceed 100 characters")
        return v

    @field_validator("address")
    @classmethod
    def _address(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Client address is required")
        if len(v) > 255:
            raise ValueError("Address cannot exceed 255 characters")
        return v

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

    @field_validator("contact_person", "contact_phone")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ClientRead(BaseModel):
    id: int
    name: str
    address: str
    latitude: float | None
    longitude: float | None
    contact_person: str | None = None
    contact_phone: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class AssignmentCreate(BaseModel):
    employee_id: StrictInt = Field(gt=0)


class AssignmentRead(BaseModel):
    id: int
    employee_id: int
    client_id: int
    assigned_date: date

    model_config = {"from_attributes": True}
