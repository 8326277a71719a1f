"""
Client sites and the employee-to-client assignments that permit check-ins.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Column, Date, DateTime, Float, ForeignKey, Integer,
                        String, UniqueConstraint)

from fieldforce.db.base import Base


class Client(Base):
    __tablename__ = "clients"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    address: str = Column(String(255), nullable=False)  # type: ignore[assignment]
    latitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    longitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    contact_person: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    contact_phone: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )


class EmployeeClient(Base):
    __tablename__ = "employee_clients"
    __table_args__ = (
        UniqueConstraint("employee_id", "client_id", name="uq_assignment_emp_client"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # type: ignore[assignment]
    client_id: int = Column(Integer, ForeignKey("clients.id"), nullable=False)  # type: ignore[assignment]
    assigned_date: date = Column(  # type: ignore[assignment]
        Date,
        nullable=False,
        default=lambda: datetime.now(timezone.utc).date(),
    )
