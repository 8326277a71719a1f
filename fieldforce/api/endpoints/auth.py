"""
Auth endpoints — login, logout, current user, team account creation.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from fieldforce.api.deps import get_current_user, get_store, require_manager
from fieldforce.core.config import settings
from fieldforce.core.exceptions import AuthError, ValidationError
from fieldforce.core.security import (create_access_token, get_password_hash,
                                      verify_password)
from fieldforce.db.store import FieldStore
from fieldforce.models.user import User
from fieldforce.schemas.user import (LoginRequest, LogoutResponse, Token,
                                     UserCreate, UserRead)

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    store: FieldStore = Depends(get_store),
) -> Token:
    """Authenticate with email/password. Also sets an HttpOnly cookie."""
    user = await store.get_user_by_email(body.email)
    if user is None or not verify_password(body.password, user.hashed_password):
        logger.warning("Failed login for %s", body.email)
        raise AuthError("Invalid credentials")

    access_token = create_access_token(user.id, role=user.role)
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info("User %d logged in", user.id)
    return Token(access_token=access_token, user=UserRead.model_validate(user))


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """Clear the auth cookie and end the session."""
    response.delete_cookie("access_token")
    return LogoutResponse(message="Logged out")


@router.get("/me", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Return profile of the currently authenticated user."""
    return current_user


@router.post("/users", response_model=UserRead, status_code=201)
async def create_team_user(
    body: UserCreate,
    store: FieldStore = Depends(get_store),
    manager: User = Depends(require_manager),
) -> User:
    """Create an account reporting to the calling manager."""
    if await store.get_user_by_email(body.email) is not None:
        raise ValidationError("Email already registered")

    user = await store.create_user(
        name=body.name,
        email=body.email,
        hashed_password=get_password_hash(body.password),
        role=body.role,
        manager_id=manager.id,
    )
    logger.info("Manager %d created user %d (%s)", manager.id, user.id, user.role)
    return user
