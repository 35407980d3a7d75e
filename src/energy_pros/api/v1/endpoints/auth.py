# src/energy_pros/api/v1/endpoints/auth.py
"""Registration, login and session endpoints.

Every route is also served at its historical un-prefixed path.
"""

import logging

from fastapi import APIRouter, Response, status

from energy_pros.api.v1.dependencies import CurrentUserDep
from energy_pros.core.security import create_session_token
from energy_pros.core.settings import settings
from energy_pros.models import User
from energy_pros.repositories import StorageDep
from energy_pros.schemas.common import MessageResponse
from energy_pros.schemas.user import LoginRequest, RegisterRequest, UserResponse
from energy_pros.services.accounts import authenticate, register_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _start_session(response: Response, user: User) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user.id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/auth/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def register(
    request: RegisterRequest,
    response: Response,
    storage: StorageDep,
) -> User:
    """Create an account with a single-use invite code and sign it in."""
    user = register_user(storage, request, invite_required=settings.invite_required)
    _start_session(response, user)
    return user


@router.post("/auth/login", response_model=UserResponse)
@router.post("/login", response_model=UserResponse, include_in_schema=False)
async def login(
    request: LoginRequest,
    response: Response,
    storage: StorageDep,
) -> User:
    """Verify email and password and start a session."""
    user = authenticate(storage, request.email, request.password)
    _start_session(response, user)
    logger.info("User %s signed in", user.id)
    return user


@router.post("/auth/logout", response_model=MessageResponse)
@router.post("/logout", response_model=MessageResponse, include_in_schema=False)
async def logout(response: Response) -> MessageResponse:
    """End the session by clearing its cookie."""
    response.delete_cookie(settings.session_cookie_name, httponly=True, samesite="lax")
    return MessageResponse(message="Logged out successfully")


@router.get("/auth/user", response_model=UserResponse)
@router.get("/current-user", response_model=UserResponse, include_in_schema=False)
async def current_user(user: CurrentUserDep) -> User:
    """Return the signed-in member's own account."""
    return user
