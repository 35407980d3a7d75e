"""Shared API dependencies for sessions and authentication."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from energy_pros.core.security import decode_session_token
from energy_pros.core.settings import settings
from energy_pros.models import Post, User
from energy_pros.repositories import StorageDep
from energy_pros.repositories.base import Storage
from energy_pros.services.context import ANONYMOUS, SessionContext

# Requests without an Authorization header fall back to the session cookie.
bearer_scheme = HTTPBearer(auto_error=False)


def get_session_context(
    request: Request,
    storage: StorageDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionContext:
    """Resolve who is calling from a Bearer token or the session cookie.

    Unknown, expired or tampered tokens resolve to an anonymous context
    rather than an error; endpoints that need a member ask for
    ``CurrentUserDep`` instead.
    """
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return ANONYMOUS

    user_id = decode_session_token(token)
    if user_id is None or storage.get_user(user_id) is None:
        return ANONYMOUS
    return SessionContext(user_id=user_id)


SessionContextDep = Annotated[SessionContext, Depends(get_session_context)]


def get_current_user(context: SessionContextDep, storage: StorageDep) -> User:
    """Return the signed-in member or answer 401.

    Raises:
        HTTPException: If the request carries no valid session
    """
    user = storage.get_user(context.user_id) if context.user_id is not None else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_post_or_404(storage: Storage, post_id: int) -> Post:
    post = storage.get_post(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post
