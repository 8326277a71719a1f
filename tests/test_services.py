"""Service and store tests that run below the HTTP layer."""

from datetime import date, datetime, timezone

import pytest
from sqlalchemy import func, select, text

from fieldforce.core.exceptions import (ConflictError, DataIntegrityError,
                                        ForbiddenError, NotFoundError)
from fieldforce.db.seed import seed_demo_data
from fieldforce.db.store import FieldStore
from fieldforce.models.checkin import (STATUS_CHECKED_IN, STATUS_CHECKED_OUT,
                                       Checkin)
from fieldforce.models.user import User
from fieldforce.services.checkins import FAR_FROM_CLIENT_WARNING, CheckinService
from fieldforce.services.reports import build_daily_summary

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
T1 = datetime(2024, 3, 1, 11, 30, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, *times: datetime):
        self._times = list(times)

    def __call__(self) -> datetime:
        return self._times.pop(0)


@pytest.mark.asyncio
async def test_checkin_then_checkout_uses_clock(database, team):
    async with database.session() as session:
        service = CheckinService(FieldStore(session, database), clock=FixedClock(T0, T1))
        result = await service.create_checkin(team.rahul.id, team.abc.id, 28.4946, 77.0887)
        assert result.distance_warning is None
        closed = await service.checkout(team.rahul.id)

    assert closed.id == result.checkin.id
    assert closed.status == STATUS_CHECKED_OUT
    assert closed.checkout_time == T1


@pytest.mark.asyncio
async def test_warning_threshold_is_configurable(database, team):
    async with database.session() as session:
        service = CheckinService(FieldStore(session, database), warning_km=0.0)
        result = await service.create_checkin(team.rahul.id, team.xyz.id, 28.46, 77.03)
    assert result.distance_warning == FAR_FROM_CLIENT_WARNING


@pytest.mark.asyncio
async def test_rejections_leave_no_rows(database, team):
    async with database.session() as session:
        service = CheckinService(FieldStore(session, database))
        with pytest.raises(ForbiddenError):
            await service.create_checkin(team.priya.id, team.abc.id)
        with pytest.raises(NotFoundError):
            await service.checkout(team.priya.id)

        await service.create_checkin(team.priya.id, team.xyz.id)
        with pytest.raises(ConflictError):
            await service.create_checkin(team.priya.id, team.xyz.id)

        count = await session.execute(
            select(func.count(Checkin.id)).where(Checkin.employee_id == team.priya.id)
        )
        assert count.scalar() == 1


@pytest.mark.asyncio
async def test_unique_index_violation_becomes_conflict(database, team, add_checkin, monkeypatch):
    """An active row the pre-check misses is still rejected by the partial index."""
    await add_checkin(team.priya, team.xyz, T0, status=STATUS_CHECKED_IN)

    async with database.session() as session:
        store = FieldStore(session, database)

        async def _no_active(_employee_id):
            return None

        monkeypatch.setattr(store, "get_active_checkin", _no_active)
        service = CheckinService(store)
        with pytest.raises(ConflictError):
            await service.create_checkin(team.priya.id, team.xyz.id)

        count = await session.execute(
            select(func.count(Checkin.id)).where(
                Checkin.employee_id == team.priya.id, Checkin.status == STATUS_CHECKED_IN
            )
        )
        assert count.scalar() == 1


@pytest.mark.asyncio
async def test_duplicate_active_rows_raise(database, team, add_checkin):
    async with database.session() as session:
        await session.execute(text("DROP INDEX uq_checkins_one_active"))
        await session.commit()
    await add_checkin(team.rahul, team.abc, T0, status=STATUS_CHECKED_IN)
    await add_checkin(team.rahul, team.xyz, T1, status=STATUS_CHECKED_IN)

    async with database.session() as session:
        store = FieldStore(session, database)
        with pytest.raises(DataIntegrityError):
            await store.get_active_checkin(team.rahul.id)
        with pytest.raises(DataIntegrityError):
            await CheckinService(store).checkout(team.rahul.id)


@pytest.mark.asyncio
async def test_assign_twice_returns_same_row(database, team):
    async with database.session() as session:
        store = FieldStore(session, database)
        first = await store.assign(team.vikram.id, team.xyz.id)
        second = await store.assign(team.vikram.id, team.xyz.id)
        assert first.id == second.id
        assert await store.is_assigned(team.vikram.id, team.xyz.id)


# ── Demo seed ───────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_seed_runs_once(database):
    assert await seed_demo_data(database) is True
    assert await seed_demo_data(database) is False

    async with database.session() as session:
        users = await session.execute(select(func.count(User.id)))
        assert users.scalar() == 4


@pytest.mark.asyncio
async def test_seeded_daily_summary(database):
    await seed_demo_data(database)
    async with database.session() as session:
        store = FieldStore(session, database)
        manager = await store.get_user_by_email("manager@unolo.com")
        report = await build_daily_summary(store, manager.id, date(2024, 1, 15))

    assert report.team_summary.total_employees == 3
    assert report.team_summary.employees_with_checkins == 2
    assert report.team_summary.total_checkins == 5
    assert report.team_summary.unique_clients_visited == 4
    assert len(report.employee_breakdown) == 3
    assert report.employee_breakdown[0].employee_name == "Rahul Kumar"


@pytest.mark.asyncio
async def test_employee_locks_are_per_employee(database):
    assert database.employee_lock(1) is database.employee_lock(1)
    assert database.employee_lock(1) is not database.employee_lock(2)
