"""
FastAPI dependencies — database session, store, auth guards.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Cookie, Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fieldforce.core.config import settings
from fieldforce.core.exceptions import AuthError, ForbiddenError
from fieldforce.core.security import decode_access_token
from fieldforce.db.session import Database
from fieldforce.db.store import FieldStore
from fieldforce.models.user import ROLE_MANAGER, User

# auto_error=False so we can fall back to the cookie when the header is missing
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


# ── Database ────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


def get_store(
    db: AsyncSession = Depends(get_db),
    database: Database = Depends(get_database),
) -> FieldStore:
    return FieldStore(db, database)


# ── Authorization predicate ─────────────────────────────────────────
def is_manager(user: User) -> bool:
    return user.role == ROLE_MANAGER


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # HttpOnly cookie
    store: FieldStore = Depends(get_store),
) -> User:
    """Decode JWT from Header OR Cookie, look up user."""
    final_token = token
    if not final_token and access_token:
        # Cookie is set as "Bearer <token>"
        final_token = access_token.removeprefix("Bearer ").strip()

    if not final_token:
        raise AuthError("Authorization required")

    payload = decode_access_token(final_token)
    if payload is None:
        raise AuthError("Invalid or expired token")

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise AuthError()

    user = await store.get_user(int(user_id))
    if user is None:
        raise AuthError()
    return user


async def require_manager(
    current_user: User = Depends(get_current_user),
) -> User:
    """Only allow managers to proceed."""
    if not is_manager(current_user):
        raise ForbiddenError("Manager privileges required")
    return current_user
