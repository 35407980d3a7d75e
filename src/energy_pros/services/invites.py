"""Single-use invite codes gating registration."""
from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime

from energy_pros.db.time import utcnow
from energy_pros.models import Invite
from energy_pros.repositories.base import Storage
from energy_pros.services.errors import InviteInvalid, ValidationFailed

logger = logging.getLogger(__name__)

INVITE_CODE_BYTES = 6


def generate_invite_code() -> str:
    """Return a random, human-typeable invite code."""
    return secrets.token_hex(INVITE_CODE_BYTES).upper()


class InviteGate:
    """State machine per code: unused -> used, and used is terminal."""

    def __init__(self, storage: Storage, clock: Callable[[], datetime] = utcnow) -> None:
        self.storage = storage
        self.clock = clock

    def validate(self, code: str | None) -> Invite:
        """Return the invite if it exists and is unused. Never mutates state."""
        if not code or not code.strip():
            raise ValidationFailed("Invite code is required")
        invite = self.storage.get_invite(code.strip())
        if invite is None or invite.used_at is not None:
            raise InviteInvalid()
        return invite

    def consume(self, code: str, used_by_user_id: int) -> Invite:
        """Mark a valid invite as used by the given member."""
        invite = self.validate(code)
        self.storage.mark_invite_used(invite, used_by_user_id, self.clock())
        logger.info("Invite %s consumed by user %s", invite.code, used_by_user_id)
        return invite

    def issue(self, invited_by_user_id: int, code: str | None = None) -> Invite:
        """Create a fresh invite owned by an existing member."""
        return self.storage.create_invite(
            code=code or generate_invite_code(),
            invited_by_user_id=invited_by_user_id,
        )
