"""Abstract storage interface shared by the SQL and in-memory backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from energy_pros.models import Comment, Endorsement, Invite, Post, ProfileView, Reaction, User
from energy_pros.services.engagement import Engagement

__all__ = ["Storage"]


class Storage(ABC):
    """Every persistence capability the application needs.

    Write methods stage changes; nothing is durable until ``commit`` is
    called. ``transaction`` wraps a block so that it either commits as a
    whole or rolls back as a whole.
    """

    # Unit of work -----------------------------------------------------------

    @abstractmethod
    def commit(self) -> None:
        """Make staged changes durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes."""

    def close(self) -> None:
        """Release any underlying resources."""

    @contextmanager
    def transaction(self) -> Iterator[Storage]:
        """Run a block atomically."""
        try:
            yield self
            self.commit()
        except Exception:
            self.rollback()
            raise

    # Users ------------------------------------------------------------------

    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def get_users(self, user_ids: Collection[int]) -> dict[int, User]:
        """Return the users for the given ids, keyed by id."""

    @abstractmethod
    def create_user(
        self,
        *,
        username: str,
        email: str,
        password: str,
        full_name: str,
        invited_by_user_id: int | None = None,
    ) -> User: ...

    # Posts ------------------------------------------------------------------

    @abstractmethod
    def create_post(
        self,
        *,
        content: str,
        hashtag: str,
        user_id: int | None,
        is_anonymous: bool,
        post_type: str,
        structured_data: dict[str, Any] | None,
    ) -> Post: ...

    @abstractmethod
    def get_post(self, post_id: int) -> Post | None: ...

    @abstractmethod
    def list_posts(
        self,
        *,
        hashtag: str | None = None,
        post_type: str | None = None,
        user_id: int | None = None,
        limit: int | None = None,
    ) -> list[Post]:
        """Return posts newest first, optionally filtered."""

    @abstractmethod
    def update_post_content(self, post: Post, content: str) -> Post: ...

    @abstractmethod
    def delete_post(self, post: Post) -> None:
        """Delete a post together with its reactions, endorsements and comments."""

    @abstractmethod
    def hashtag_post_counts(self) -> dict[str, int]:
        """Return the number of posts per hashtag."""

    # Reactions and endorsements --------------------------------------------

    @abstractmethod
    def get_reaction(self, user_id: int, post_id: int) -> Reaction | None: ...

    @abstractmethod
    def upsert_reaction(self, user_id: int, post_id: int, kind: str) -> tuple[Reaction, bool]:
        """Insert or overwrite the member's reaction; return (row, created)."""

    @abstractmethod
    def get_endorsement(self, user_id: int, post_id: int, hashtag: str) -> Endorsement | None: ...

    @abstractmethod
    def create_endorsement(
        self, *, user_id: int, post_id: int, hashtag: str, endorsement_type: str
    ) -> Endorsement: ...

    @abstractmethod
    def update_endorsement_type(self, endorsement: Endorsement, endorsement_type: str) -> Endorsement: ...

    @abstractmethod
    def list_engagements(self, post_ids: Collection[int] | None = None) -> list[Engagement]:
        """Return reaction and endorsement rows as engagements.

        Each engagement carries the current hashtag of the post it targets.
        Rows are not de-duplicated here.
        """

    # Comments ---------------------------------------------------------------

    @abstractmethod
    def create_comment(self, *, post_id: int, user_id: int, content: str) -> Comment: ...

    @abstractmethod
    def list_comments(self, post_id: int) -> list[Comment]:
        """Return comments oldest first."""

    @abstractmethod
    def count_comments(self, post_ids: Collection[int]) -> dict[int, int]: ...

    # Invites ----------------------------------------------------------------

    @abstractmethod
    def create_invite(self, *, code: str, invited_by_user_id: int) -> Invite: ...

    @abstractmethod
    def get_invite(self, code: str) -> Invite | None: ...

    @abstractmethod
    def mark_invite_used(self, invite: Invite, used_by_user_id: int, used_at: datetime) -> Invite: ...

    # Profile views ----------------------------------------------------------

    @abstractmethod
    def find_profile_view_since(
        self, viewer_id: int, profile_user_id: int, since: datetime
    ) -> ProfileView | None: ...

    @abstractmethod
    def add_profile_view(
        self, viewer_id: int, profile_user_id: int, viewed_at: datetime
    ) -> ProfileView: ...

    @abstractmethod
    def count_profile_views(self, profile_user_id: int) -> int: ...

    @abstractmethod
    def list_profile_views(
        self,
        profile_user_id: int,
        *,
        limit: int | None = None,
        since: datetime | None = None,
    ) -> list[ProfileView]:
        """Return views of a profile newest first."""
