"""
Check-in service: the check-in / checkout state machine.

Both transitions run inside ``FieldStore.writer`` so the "at most one
active check-in per employee" rule holds under concurrent requests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from fieldforce.core.config import settings
from fieldforce.core.exceptions import (ConflictError, ForbiddenError,
                                        NotFoundError)
from fieldforce.db.store import FieldStore
from fieldforce.models.checkin import STATUS_CHECKED_IN, Checkin
from fieldforce.services.geo import haversine_km
from fieldforce.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

FAR_FROM_CLIENT_WARNING = "You are far from the client location"


@dataclass
class CheckinResult:
    checkin: Checkin
    distance_warning: str | None = None


class CheckinService:
    def __init__(
        self,
        store: FieldStore,
        clock: Callable[[], datetime] = utc_now,
        warning_km: float | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.warning_km = settings.DISTANCE_WARNING_KM if warning_km is None else warning_km

    async def create_checkin(
        self,
        employee_id: int,
        client_id: int,
        latitude: float | None = None,
        longitude: float | None = None,
        notes: str | None = None,
    ) -> CheckinResult:
        """Open a visit at ``client_id`` for ``employee_id``.

        Raises ForbiddenError without an assignment and ConflictError when
        the employee already has an open visit.
        """
        try:
            async with self.store.writer(employee_id):
                if not await self.store.is_assigned(employee_id, client_id):
                    raise ForbiddenError("You are not assigned to this client")

                if await self.store.get_active_checkin(employee_id) is not None:
                    raise ConflictError(
                        "You already have an active check-in. Please checkout first."
                    )

                client = await self.store.get_client(client_id)
                distance = None
                if (
                    client is not None
                    and latitude is not None
                    and longitude is not None
                    and client.latitude is not None
                    and client.longitude is not None
                ):
                    distance = round(
                        haversine_km(latitude, longitude, client.latitude, client.longitude), 2
                    )

                checkin = await self.store.insert_checkin(
                    Checkin(
                        employee_id=employee_id,
                        client_id=client_id,
                        checkin_time=self.clock(),
                        latitude=latitude,
                        longitude=longitude,
                        distance_from_client=distance,
                        notes=notes,
                        status=STATUS_CHECKED_IN,
                    )
                )
        except IntegrityError:
            # Another process slipped an active row in past the row lock
            logger.warning("Duplicate active check-in rejected for employee %d", employee_id)
            raise ConflictError(
                "You already have an active check-in. Please checkout first."
            ) from None

        warning = None
        if distance is not None and distance > self.warning_km:
            warning = FAR_FROM_CLIENT_WARNING
            logger.warning(
                "Employee %d checked in %.2f km from client %d", employee_id, distance, client_id
            )

        logger.info("Check-in %d: employee %d at client %d", checkin.id, employee_id, client_id)
        return CheckinResult(checkin=checkin, distance_warning=warning)

    async def checkout(self, employee_id: int) -> Checkin:
        """Close the employee's open visit, NotFoundError if there is none."""
        async with self.store.writer(employee_id):
            active = await self.store.get_active_checkin(employee_id)
            if active is None:
                raise NotFoundError("No active check-in found")
            checkin = await self.store.close_checkin(active, self.clock())

        logger.info("Checkout %d: employee %d", checkin.id, employee_id)
        return checkin
