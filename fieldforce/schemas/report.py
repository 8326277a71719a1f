"""Pydantic schemas for reports and dashboards."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from fieldforce.schemas.checkin import CheckinRead
from fieldforce.schemas.client import ClientRead
from fieldforce.utils.datetime_utils import ensure_utc


# ── Daily Summary ──────────────────────────────────────────────────
class SummaryCheckin(BaseModel):
    id: int
    client_id: int
    client_name: str
    client_address: str | None
    checkin_time: datetime
    checkout_time: datetime | None
    hours_worked: float
    distance_from_client: float | None
    notes: str | None
    status: str

    @field_validator("checkin_time", "checkout_time")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None


class EmployeeBreakdown(BaseModel):
    employee_id: int
    employee_name: str
    employee_email: str
    total_checkins: int = 0
    hours_worked: float = 0.0
    clients_visited: list[str] = Field(default_factory=list)
    average_distance: float | None = None
    checkins: list[SummaryCheckin] = Field(default_factory=list)


class TeamSummary(BaseModel):
    total_employees: int = 0
    employees_with_checkins: int = 0
    total_checkins: int = 0
    total_hours_worked: float = 0.0
    unique_clients_visited: int = 0
    average_distance_from_client: float | None = None


class DailySummaryResponse(BaseModel):
    date: str  # YYYY-MM-DD
    team_summary: TeamSummary
    employee_breakdown: list[EmployeeBreakdown]


# ── Dashboards ─────────────────────────────────────────────────────
class WeekStats(BaseModel):
    total_checkins: int
    unique_clients: int


class TeamMember(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class ManagerStatsResponse(BaseModel):
    team_size: int
    team_members: list[TeamMember]
    today_checkins: list[CheckinRead]
    active_checkins: int


class DayCount(BaseModel):
    date: str  # YYYY-MM-DD
    count: int


class MemberCount(BaseModel):
    id: int
    name: str
    count: int


class MemberActiveCount(BaseModel):
    id: int
    name: str
    active_count: int


class ChartDataResponse(BaseModel):
    checkins_last_7_days: list[DayCount]
    checkins_per_member_last_7_days: list[MemberCount]
    active_checkins_per_member: list[MemberActiveCount]


class EmployeeDashboardResponse(BaseModel):
    today_checkins: list[CheckinRead]
    assigned_clients: list[ClientRead]
    week_stats: WeekStats


# ── Health ─────────────────────────────────────────────────────────
class HealthResponse(BaseModel):
    status: str
    db: bool
    timestamp: datetime
