"""
Shared test fixtures for the field force tracker test suite.

Every test gets its own SQLite file (aiosqlite) and an app built around it.
"""

import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["CORS_ORIGINS"] = '["*"]'

from httpx import ASGITransport, AsyncClient
from fastapi import FastAPI

from fieldforce.core.security import create_access_token, get_password_hash
from fieldforce.db.session import Database
from fieldforce.main import create_app
from fieldforce.models.checkin import STATUS_CHECKED_OUT, Checkin
from fieldforce.models.client import Client, EmployeeClient
from fieldforce.models.user import ROLE_EMPLOYEE, ROLE_MANAGER, User

PASSWORD = "password123"
_PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A fresh database with all tables created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(database: Database) -> FastAPI:
    return create_app(database=database)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ── Team fixture ────────────────────────────────────────────────────
@dataclass
class Team:
    manager: User
    other_manager: User
    rahul: User
    priya: User
    vikram: User
    abc: Client  # assigned to rahul, vikram
    xyz: Client  # assigned to rahul, priya
    unassigned: Client


@pytest.fixture
async def team(database: Database) -> Team:
    """A manager with three employees, a second manager with no team, and clients."""
    async with database.session() as session:
        manager = User(name="Amit Sharma", email="manager@unolo.com",
                       hashed_password=_PASSWORD_HASH, role=ROLE_MANAGER)
        other = User(name="Other Manager", email="other@unolo.com",
                     hashed_password=_PASSWORD_HASH, role=ROLE_MANAGER)
        session.add_all([manager, other])
        await session.flush()

        rahul = User(name="Rahul Kumar", email="rahul@unolo.com",
                     hashed_password=_PASSWORD_HASH, role=ROLE_EMPLOYEE, manager_id=manager.id)
        priya = User(name="Priya Singh", email="priya@unolo.com",
                     hashed_password=_PASSWORD_HASH, role=ROLE_EMPLOYEE, manager_id=manager.id)
        vikram = User(name="Vikram Patel", email="vikram@unolo.com",
                      hashed_password=_PASSWORD_HASH, role=ROLE_EMPLOYEE, manager_id=manager.id)
        abc = Client(name="ABC Corp", address="Cyber City, Gurugram",
                     latitude=28.4946, longitude=77.0887)
        xyz = Client(name="XYZ Ltd", address="Sector 44, Gurugram",
                     latitude=28.4595, longitude=77.0266)
        unassigned = Client(name="Innovate Inc", address="Sector 18, Noida",
                            latitude=28.5707, longitude=77.3219)
        session.add_all([rahul, priya, vikram, abc, xyz, unassigned])
        await session.flush()

        session.add_all([
            EmployeeClient(employee_id=rahul.id, client_id=abc.id),
            EmployeeClient(employee_id=rahul.id, client_id=xyz.id),
            EmployeeClient(employee_id=priya.id, client_id=xyz.id),
            EmployeeClient(employee_id=vikram.id, client_id=abc.id),
        ])
        await session.commit()

    return Team(manager, other, rahul, priya, vikram, abc, xyz, unassigned)


@pytest.fixture
def add_checkin(database: Database):
    """Insert a historical check-in directly, bypassing the API clock."""

    async def _add(
        employee: User,
        client: Client,
        checkin_time: datetime,
        checkout_time: datetime | None = None,
        distance: float | None = None,
        status: str = STATUS_CHECKED_OUT,
    ) -> Checkin:
        async with database.session() as session:
            checkin = Checkin(
                employee_id=employee.id,
                client_id=client.id,
                checkin_time=checkin_time,
                checkout_time=checkout_time,
                latitude=client.latitude,
                longitude=client.longitude,
                distance_from_client=distance,
                status=status,
            )
            session.add(checkin)
            await session.commit()
            return checkin

    return _add


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user.id, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers
