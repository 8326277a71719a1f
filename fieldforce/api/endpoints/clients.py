"""
Client endpoints.

- GET /clients is open to any authenticated user.
- Creating clients and assigning them to employees requires a manager.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from fieldforce.api.deps import get_current_user, get_store, require_manager
from fieldforce.core.exceptions import NotFoundError
from fieldforce.db.store import FieldStore
from fieldforce.models.client import Client, EmployeeClient
from fieldforce.models.user import User
from fieldforce.schemas.client import (AssignmentCreate, AssignmentRead,
                                       ClientCreate, ClientRead)

router = APIRouter(prefix="/clients", tags=["clients"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[ClientRead])
async def list_clients(
    store: FieldStore = Depends(get_store),
    _user: User = Depends(get_current_user),
) -> list[Client]:
    return await store.list_clients()


@router.post("", response_model=ClientRead, status_code=201)
async def create_client(
    body: ClientCreate,
    store: FieldStore = Depends(get_store),
    manager: User = Depends(require_manager),
) -> Client:
    client = await store.create_client(**body.model_dump())
    logger.info("Manager %d created client %d (%s)", manager.id, client.id, client.name)
    return client


@router.post(
    "/{client_id}/assignments", response_model=AssignmentRead, status_code=201
)
async def assign_client(
    client_id: int,
    body: AssignmentCreate,
    store: FieldStore = Depends(get_store),
    manager: User = Depends(require_manager),
) -> EmployeeClient:
    """Allow a team member to check in at this client (idempotent)."""
    if await store.get_client(client_id) is None:
        raise NotFoundError("Client not found")

    employee = await store.get_user(body.employee_id)
    if employee is None or employee.manager_id != manager.id:
        raise NotFoundError("Employee not found in your team")

    assignment = await store.assign(employee.id, client_id)
    logger.info("Assigned client %d to employee %d", client_id, employee.id)
    return assignment
