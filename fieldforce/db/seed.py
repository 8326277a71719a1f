"""
Demo data seeded into an empty database on first startup.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy import func, select

from fieldforce.core.security import get_password_hash
from fieldforce.db.session import Database
from fieldforce.models.checkin import STATUS_CHECKED_OUT, Checkin
from fieldforce.models.client import Client, EmployeeClient
from fieldforce.models.user import ROLE_EMPLOYEE, ROLE_MANAGER, User

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

_USERS = [
    # key, name, email, role, manager key
    ("amit", "Amit Sharma", "manager@unolo.com", ROLE_MANAGER, None),
    ("rahul", "Rahul Kumar", "rahul@unolo.com", ROLE_EMPLOYEE, "amit"),
    ("priya", "Priya Singh", "priya@unolo.com", ROLE_EMPLOYEE, "amit"),
    ("vikram", "Vikram Patel", "vikram@unolo.com", ROLE_EMPLOYEE, "amit"),
]

_CLIENTS = [
    ("abc", "ABC Corp", "Cyber City, Gurugram", 28.4946, 77.0887),
    ("xyz", "XYZ Ltd", "Sector 44, Gurugram", 28.4595, 77.0266),
    ("tech", "Tech Solutions", "DLF Phase 3, Gurugram", 28.4947, 77.0952),
    ("global", "Global Services", "Udyog Vihar, Gurugram", 28.5011, 77.0838),
    ("innovate", "Innovate Inc", "Sector 18, Noida", 28.5707, 77.3219),
]

_ASSIGNMENTS = [
    ("rahul", "abc", date(2024, 1, 1)),
    ("rahul", "xyz", date(2024, 1, 1)),
    ("rahul", "tech", date(2024, 1, 15)),
    ("priya", "xyz", date(2024, 1, 1)),
    ("priya", "global", date(2024, 1, 1)),
    ("vikram", "abc", date(2024, 1, 10)),
    ("vikram", "innovate", date(2024, 1, 10)),
]


def _at(hour: int, minute: int) -> datetime:
    return datetime(2024, 1, 15, hour, minute, tzinfo=timezone.utc)


_VISITS = [
    # employee, client, in, out, distance km, notes
    ("rahul", "abc", _at(9, 15), _at(11, 30), 0.05, "Regular visit"),
    ("rahul", "xyz", _at(12, 0), _at(14, 0), 0.02, "Product demo"),
    ("rahul", "tech", _at(15, 0), _at(17, 30), 0.03, "Follow up meeting"),
    ("priya", "xyz", _at(9, 30), _at(12, 0), 0.01, "Contract discussion"),
    ("priya", "global", _at(13, 0), _at(16, 0), 0.04, "New requirements"),
]


async def seed_demo_data(database: Database) -> bool:
    """Insert the demo team if no users exist. Returns True if seeded."""
    async with database.session() as session:
        existing = await session.execute(select(func.count(User.id)))
        if existing.scalar():
            return False

        hashed = get_password_hash(DEMO_PASSWORD)
        users: dict[str, User] = {}
        for key, name, email, role, manager_key in _USERS:
            user = User(name=name, email=email, hashed_password=hashed, role=role)
            if manager_key is not None:
                user.manager_id = users[manager_key].id
            session.add(user)
            await session.flush()
            users[key] = user

        clients = {
            key: Client(name=name, address=address, latitude=lat, longitude=lng)
            for key, name, address, lat, lng in _CLIENTS
        }
        session.add_all(clients.values())
        await session.flush()

        session.add_all(
            EmployeeClient(
                employee_id=users[emp].id, client_id=clients[cid].id, assigned_date=assigned
            )
            for emp, cid, assigned in _ASSIGNMENTS
        )
        session.add_all(
            Checkin(
                employee_id=users[emp].id,
                client_id=clients[cid].id,
                checkin_time=start,
                checkout_time=end,
                latitude=clients[cid].latitude,
                longitude=clients[cid].longitude,
                distance_from_client=distance,
                notes=notes,
                status=STATUS_CHECKED_OUT,
            )
            for emp, cid, start, end, distance, notes in _VISITS
        )
        await session.commit()

    logger.info(
        "Demo data seeded: %d users, %d clients (password: <redacted>)",
        len(_USERS),
        len(_CLIENTS),
    )
    return True
