"""
Report builder — team daily summaries and dashboard aggregates.

Each report fetches its rows in one query and aggregates in Python.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from fieldforce.core.exceptions import NotFoundError
from fieldforce.db.store import FieldStore
from fieldforce.models.checkin import Checkin
from fieldforce.models.client import Client
from fieldforce.models.user import User
from fieldforce.schemas.checkin import CheckinRead
from fieldforce.schemas.client import ClientRead
from fieldforce.schemas.report import (ChartDataResponse, DailySummaryResponse,
                                       DayCount, EmployeeBreakdown,
                                       EmployeeDashboardResponse,
                                       ManagerStatsResponse, MemberActiveCount,
                                       MemberCount, SummaryCheckin,
                                       TeamMember, TeamSummary, WeekStats)
from fieldforce.utils.datetime_utils import day_bounds, ensure_utc, hours_between

WEEK = timedelta(days=7)


def _average(values: list[float]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


@dataclass
class _Tally:
    """Running totals for one employee (or the whole team)."""

    checkins: int = 0
    hours: float = 0.0
    distances: list[float] = field(default_factory=list)
    client_names: dict[str, None] = field(default_factory=dict)  # ordered set
    client_ids: set[int] = field(default_factory=set)
    details: list[SummaryCheckin] = field(default_factory=list)

    def add(self, checkin: Checkin, client: Client, hours: float) -> None:
        self.checkins += 1
        self.hours += hours
        self.client_names.setdefault(client.name, None)
        self.client_ids.add(client.id)
        if checkin.distance_from_client is not None:
            self.distances.append(checkin.distance_from_client)


# ── Daily Summary ──────────────────────────────────────────────────
async def build_daily_summary(
    store: FieldStore,
    manager_id: int,
    day: date,
    employee_id: int | None = None,
) -> DailySummaryResponse:
    """Aggregate a manager's team activity for one UTC calendar day."""
    team = await store.list_team(manager_id)
    if not team:
        return DailySummaryResponse(
            date=day.isoformat(),
            team_summary=TeamSummary(),
            employee_breakdown=[],
        )

    if employee_id is not None:
        team = [member for member in team if member.id == employee_id]
        if not team:
            raise NotFoundError("Employee not found in your team")

    start, end = day_bounds(day)
    rows = await store.list_team_checkins(manager_id, start, end, employee_id=employee_id)

    tallies: dict[int, _Tally] = {member.id: _Tally() for member in team}
    team_tally = _Tally()

    for checkin, _employee, client in rows:
        tally = tallies.get(checkin.employee_id)
        if tally is None:
            continue
        hours = hours_between(checkin.checkin_time, checkin.checkout_time)
        tally.add(checkin, client, hours)
        team_tally.add(checkin, client, hours)
        tally.details.append(
            SummaryCheckin(
                id=checkin.id,
                client_id=client.id,
                client_name=client.name,
                client_address=client.address,
                checkin_time=checkin.checkin_time,
                checkout_time=checkin.checkout_time,
                hours_worked=round(hours, 2),
                distance_from_client=checkin.distance_from_client,
                notes=checkin.notes,
                status=checkin.status,
            )
        )

    breakdown = [
        EmployeeBreakdown(
            employee_id=member.id,
            employee_name=member.name,
            employee_email=member.email,
            total_checkins=tallies[member.id].checkins,
            hours_worked=round(tallies[member.id].hours, 2),
            clients_visited=list(tallies[member.id].client_names),
            average_distance=_average(tallies[member.id].distances),
            checkins=tallies[member.id].details,
        )
        for member in team
    ]
    breakdown.sort(key=lambda entry: entry.total_checkins, reverse=True)

    return DailySummaryResponse(
        date=day.isoformat(),
        team_summary=TeamSummary(
            total_employees=len(team),
            employees_with_checkins=sum(1 for entry in breakdown if entry.total_checkins),
            total_checkins=team_tally.checkins,
            total_hours_worked=round(team_tally.hours, 2),
            unique_clients_visited=len(team_tally.client_ids),
            average_distance_from_client=_average(team_tally.distances),
        ),
        employee_breakdown=breakdown,
    )


# ── Employee ───────────────────────────────────────────────────────
async def week_stats(store: FieldStore, employee_id: int, now: datetime) -> WeekStats:
    """Check-ins and distinct clients over the trailing seven days."""
    total, unique_clients = await store.count_checkins_since(employee_id, now - WEEK)
    return WeekStats(total_checkins=total, unique_clients=unique_clients)


async def employee_dashboard(
    store: FieldStore, employee_id: int, now: datetime
) -> EmployeeDashboardResponse:
    today = now.date()
    rows = await store.list_checkins(employee_id, start_date=today, end_date=today)
    clients = await store.list_assigned_clients(employee_id)
    return EmployeeDashboardResponse(
        today_checkins=[CheckinRead.from_row(checkin, client) for checkin, client in rows],
        assigned_clients=[ClientRead.model_validate(c) for c in clients],
        week_stats=await week_stats(store, employee_id, now),
    )


# ── Manager ────────────────────────────────────────────────────────
async def manager_stats(store: FieldStore, manager: User, now: datetime) -> ManagerStatsResponse:
    team = await store.list_team(manager.id)
    start, end = day_bounds(now.date())
    rows = await store.list_team_checkins(manager.id, start, end)
    today = sorted(rows, key=lambda row: ensure_utc(row[0].checkin_time), reverse=True)

    return ManagerStatsResponse(
        team_size=len(team),
        team_members=[TeamMember.model_validate(member) for member in team],
        today_checkins=[
            CheckinRead.from_row(checkin, client, employee) for checkin, employee, client in today
        ],
        active_checkins=await store.count_active_for_team(manager.id),
    )


async def manager_chart_data(store: FieldStore, manager: User, now: datetime) -> ChartDataResponse:
    """Series for the manager dashboard charts."""
    today = now.date()
    first_day = today - timedelta(days=6)
    times = await store.list_team_checkin_times(manager.id, day_bounds(first_day)[0])
    per_day = Counter(ensure_utc(t).date() for t in times)

    days = [first_day + timedelta(days=i) for i in range(7)]
    daily = [DayCount(date=d.isoformat(), count=per_day[d]) for d in days]
    per_member = await store.team_counts_since(manager.id, now - WEEK)
    active = await store.team_active_counts(manager.id)

    return ChartDataResponse(
        checkins_last_7_days=daily,
        checkins_per_member_last_7_days=[
            MemberCount(id=member_id, name=name, count=count)
            for member_id, name, count in per_member
        ],
        active_checkins_per_member=[
            MemberActiveCount(id=member_id, name=name, active_count=count)
            for member_id, name, count in active
        ],
    )
