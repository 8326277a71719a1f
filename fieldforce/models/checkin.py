"""
Checkin model — one visit of an employee to a client site.

A row is created ``checked_in`` and moves to ``checked_out`` exactly once.
The partial unique index keeps at most one open visit per employee.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (Column, DateTime, Float, ForeignKey, Index, Integer,
                        String, text)

from fieldforce.db.base import Base

STATUS_CHECKED_IN = "checked_in"
STATUS_CHECKED_OUT = "checked_out"


class Checkin(Base):
    __tablename__ = "checkins"
    __table_args__ = (
        Index("ix_checkins_employee_time", "employee_id", "checkin_time"),
        Index(
            "uq_checkins_one_active",
            "employee_id",
            unique=True,
            sqlite_where=text("status = 'checked_in'"),
            postgresql_where=text("status = 'checked_in'"),
        ),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    client_id: int = Column(Integer, ForeignKey("clients.id"), nullable=False)  # type: ignore[assignment]
    checkin_time: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    checkout_time: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    latitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    longitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    distance_from_client: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(String(2000), nullable=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=STATUS_CHECKED_IN,
    )  # checked_in | checked_out
