"""
FieldStore — the only component that reads or mutates entities.

A store wraps one request-scoped ``AsyncSession`` plus the process-wide
``Database`` (for its per-employee locks). Reads return ORM snapshots or
row tuples; writes go through :meth:`FieldStore.writer`.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import date, datetime

from sqlalchemy import Row, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldforce.core.exceptions import DataIntegrityError
from fieldforce.db.session import Database
from fieldforce.models.checkin import (STATUS_CHECKED_IN, STATUS_CHECKED_OUT,
                                       Checkin)
from fieldforce.models.client import Client, EmployeeClient
from fieldforce.models.user import User
from fieldforce.utils.datetime_utils import day_bounds

logger = logging.getLogger(__name__)


class FieldStore:
    def __init__(self, session: AsyncSession, database: Database) -> None:
        self.session = session
        self.database = database

    # ── Write section ───────────────────────────────────────────────
    @asynccontextmanager
    async def writer(self, employee_id: int) -> AsyncIterator[None]:
        """Serialise mutations for one employee and commit them as a unit.

        Holds the in-process employee lock and a row lock on the employee
        (``FOR UPDATE`` is a no-op on SQLite). Any exception rolls back.
        """
        async with self.database.employee_lock(employee_id):
            try:
                await self.session.execute(
                    select(User.id).where(User.id == employee_id).with_for_update()
                )
                yield
                await self.session.commit()
            except BaseException:
                await self.session.rollback()
                raise

    # ── Users ───────────────────────────────────────────────────────
    async def get_user(self, user_id: int) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def list_team(self, manager_id: int) -> list[User]:
        result = await self.session.execute(
            select(User).where(User.manager_id == manager_id).order_by(User.id)
        )
        return list(result.scalars().all())

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        hashed_password: str,
        role: str,
        manager_id: int | None = None,
    ) -> User:
        user = User(
            name=name,
            email=email.strip().lower(),
            hashed_password=hashed_password,
            role=role,
            manager_id=manager_id,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    # ── Clients ─────────────────────────────────────────────────────
    async def get_client(self, client_id: int) -> Client | None:
        result = await self.session.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def list_clients(self) -> list[Client]:
        result = await self.session.execute(select(Client).order_by(Client.name))
        return list(result.scalars().all())

    async def list_assigned_clients(self, employee_id: int) -> list[Client]:
        result = await self.session.execute(
            select(Client)
            .join(EmployeeClient, EmployeeClient.client_id == Client.id)
            .where(EmployeeClient.employee_id == employee_id)
            .order_by(Client.name)
        )
        return list(result.scalars().all())

    async def create_client(self, **fields: object) -> Client:
        client = Client(**fields)
        self.session.add(client)
        await self.session.commit()
        await self.session.refresh(client)
        return client

    # ── Assignments ─────────────────────────────────────────────────
    async def get_assignment(self, employee_id: int, client_id: int) -> EmployeeClient | None:
        result = await self.session.execute(
            select(EmployeeClient).where(
                EmployeeClient.employee_id == employee_id,
                EmployeeClient.client_id == client_id,
            )
        )
        return result.scalar_one_or_none()

    async def is_assigned(self, employee_id: int, client_id: int) -> bool:
        return await self.get_assignment(employee_id, client_id) is not None

    async def assign(self, employee_id: int, client_id: int) -> EmployeeClient:
        """Assign a client to an employee; an existing pair is returned as-is."""
        async with self.writer(employee_id):
            existing = await self.get_assignment(employee_id, client_id)
            if existing is not None:
                return existing
            assignment = EmployeeClient(employee_id=employee_id, client_id=client_id)
            self.session.add(assignment)
            await self.session.flush()
        await self.session.refresh(assignment)
        return assignment

    # ── Check-ins: single records ───────────────────────────────────
    async def get_active_checkin(self, employee_id: int) -> Checkin | None:
        result = await self.session.execute(
            select(Checkin)
            .where(Checkin.employee_id == employee_id, Checkin.status == STATUS_CHECKED_IN)
            .order_by(Checkin.checkin_time.desc())
        )
        active = list(result.scalars().all())
        if len(active) > 1:
            logger.error(
                "Employee %d has %d active check-ins (ids %s)",
                employee_id,
                len(active),
                [c.id for c in active],
            )
            raise DataIntegrityError(
                f"Employee {employee_id} has more than one active check-in"
            )
        return active[0] if active else None

    async def get_checkin_detail(self, checkin_id: int) -> Row | None:
        """``(Checkin, Client)`` for one check-in."""
        result = await self.session.execute(
            select(Checkin, Client)
            .join(Client, Checkin.client_id == Client.id)
            .where(Checkin.id == checkin_id)
        )
        return result.first()

    async def get_active_checkin_detail(self, employee_id: int) -> Row | None:
        active = await self.get_active_checkin(employee_id)
        if active is None:
            return None
        return await self.get_checkin_detail(active.id)

    async def insert_checkin(self, checkin: Checkin) -> Checkin:
        """Stage a new check-in; must run inside :meth:`writer`."""
        self.session.add(checkin)
        await self.session.flush()
        return checkin

    async def close_checkin(self, checkin: Checkin, at: datetime) -> Checkin:
        """Move an open check-in to checked_out; must run inside :meth:`writer`."""
        checkin.checkout_time = at
        checkin.status = STATUS_CHECKED_OUT
        await self.session.flush()
        return checkin

    # ── Check-ins: listings ─────────────────────────────────────────
    async def list_checkins(
        self,
        employee_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Sequence[Row]:
        """``(Checkin, Client)`` rows for inclusive calendar days, newest first."""
        query = (
            select(Checkin, Client)
            .join(Client, Checkin.client_id == Client.id)
            .where(Checkin.employee_id == employee_id)
            .order_by(Checkin.checkin_time.desc())
        )
        if start_date is not None:
            query = query.where(Checkin.checkin_time >= day_bounds(start_date)[0])
        if end_date is not None:
            query = query.where(Checkin.checkin_time < day_bounds(end_date)[1])
        result = await self.session.execute(query)
        return result.all()

    async def list_team_checkins(
        self,
        manager_id: int,
        start: datetime,
        end: datetime,
        employee_id: int | None = None,
    ) -> Sequence[Row]:
        """``(Checkin, User, Client)`` rows for a team within ``[start, end)``."""
        query = (
            select(Checkin, User, Client)
            .join(User, Checkin.employee_id == User.id)
            .join(Client, Checkin.client_id == Client.id)
            .where(
                User.manager_id == manager_id,
                Checkin.checkin_time >= start,
                Checkin.checkin_time < end,
            )
            .order_by(Checkin.employee_id, Checkin.checkin_time)
        )
        if employee_id is not None:
            query = query.where(Checkin.employee_id == employee_id)
        result = await self.session.execute(query)
        return result.all()

    async def count_active_for_team(self, manager_id: int) -> int:
        result = await self.session.execute(
            select(func.count(Checkin.id))
            .join(User, Checkin.employee_id == User.id)
            .where(User.manager_id == manager_id, Checkin.status == STATUS_CHECKED_IN)
        )
        return result.scalar() or 0

    async def count_checkins_since(self, employee_id: int, since: datetime) -> tuple[int, int]:
        """``(total check-ins, distinct clients)`` for an employee since ``since``."""
        result = await self.session.execute(
            select(
                func.count(Checkin.id),
                func.count(func.distinct(Checkin.client_id)),
            ).where(Checkin.employee_id == employee_id, Checkin.checkin_time >= since)
        )
        total, unique_clients = result.one()
        return total or 0, unique_clients or 0

    async def list_team_checkin_times(self, manager_id: int, since: datetime) -> list[datetime]:
        result = await self.session.execute(
            select(Checkin.checkin_time)
            .join(User, Checkin.employee_id == User.id)
            .where(User.manager_id == manager_id, Checkin.checkin_time >= since)
        )
        return list(result.scalars().all())

    async def team_counts_since(self, manager_id: int, since: datetime) -> Sequence[Row]:
        """``(User.id, User.name, count)`` per team member since ``since``."""
        result = await self.session.execute(
            select(User.id, User.name, func.count(Checkin.id).label("count"))
            .outerjoin(
                Checkin,
                (Checkin.employee_id == User.id) & (Checkin.checkin_time >= since),
            )
            .where(User.manager_id == manager_id)
            .group_by(User.id, User.name)
            .order_by(func.count(Checkin.id).desc(), User.name.asc())
        )
        return result.all()

    async def team_active_counts(self, manager_id: int) -> Sequence[Row]:
        """``(User.id, User.name, active_count)`` per team member."""
        result = await self.session.execute(
            select(User.id, User.name, func.count(Checkin.id).label("active_count"))
            .outerjoin(
                Checkin,
                (Checkin.employee_id == User.id) & (Checkin.status == STATUS_CHECKED_IN),
            )
            .where(User.manager_id == manager_id)
            .group_by(User.id, User.name)
            .order_by(func.count(Checkin.id).desc(), User.name.asc())
        )
        return result.all()
