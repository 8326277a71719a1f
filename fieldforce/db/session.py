"""
Async SQLAlchemy engine, session factory and per-employee write locks.

One ``Database`` is built per process (by the app factory or its lifespan)
and disposed at shutdown; nothing here is created at import time.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fieldforce.db.base import Base


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Process-wide handle on the check-in database."""

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        engine_args: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
        if "postgresql" in url:
            engine_args.update({"pool_size": 20, "max_overflow": 10, "pool_recycle": 300})
        engine_args.update(engine_kwargs)

        self.url = url
        self.engine = create_async_engine(url, **engine_args)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        # One lock per employee id, never evicted; bounded by the size of the users table
        self._employee_locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    def employee_lock(self, employee_id: int) -> asyncio.Lock:
        """Mutex serialising check-in mutations of one employee."""
        return self._employee_locks[employee_id]

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session
