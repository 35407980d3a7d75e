"""Request-scoped identity passed explicitly into services."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """Who is making the current request; ``user_id`` is None for guests."""

    user_id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = SessionContext()
