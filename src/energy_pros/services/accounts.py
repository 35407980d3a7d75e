"""Registration and credential checks."""
from __future__ import annotations

import logging

from energy_pros.core import security
from energy_pros.models import User
from energy_pros.repositories.base import Storage
from energy_pros.schemas.user import RegisterRequest
from energy_pros.services.errors import AuthenticationRequired, Conflict, ValidationFailed
from energy_pros.services.invites import InviteGate

logger = logging.getLogger(__name__)


def register_user(storage: Storage, data: RegisterRequest, *, invite_required: bool) -> User:
    """Create a member account, consuming the invite code in the same transaction.

    The invite is validated before the user row is written and marked used
    before the transaction commits, so a failure at either step leaves no
    account behind and the code stays unused.
    """
    gate = InviteGate(storage)
    with storage.transaction():
        if storage.get_user_by_email(data.email) is not None:
            raise Conflict("User with this email already exists")
        if storage.get_user_by_username(data.username) is not None:
            raise Conflict("Username already taken")

        invite = None
        if data.invite_code:
            invite = gate.validate(data.invite_code)
        elif invite_required:
            raise ValidationFailed("Invite code is required")

        user = storage.create_user(
            username=data.username,
            email=data.email,
            password=security.hash_password(data.password),
            full_name=data.full_name,
            invited_by_user_id=invite.invited_by_user_id if invite is not None else None,
        )
        if invite is not None:
            try:
                gate.consume(invite.code, user.id)
            except Exception:
                logger.exception(
                    "Failed to consume invite %s for new user %s; rolling back registration",
                    invite.code,
                    data.username,
                )
                raise
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


def authenticate(storage: Storage, email: str, password: str) -> User:
    """Return the member matching the credentials."""
    user = storage.get_user_by_email(email)
    if user is None or not security.verify_password(password, user.password):
        raise AuthenticationRequired("Invalid credentials")
    return user
