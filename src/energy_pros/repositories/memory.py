"""In-memory storage used as a fast, deterministic test double.

State lives in plain dicts keyed by auto-incrementing integer ids. Writes
record an undo step so that ``rollback`` behaves like the SQL backend:
everything since the last ``commit`` is discarded.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Collection
from datetime import datetime
from itertools import count
from typing import Any

from energy_pros.db.time import as_utc, utcnow
from energy_pros.models import Comment, Endorsement, Invite, Post, ProfileView, Reaction, User
from energy_pros.repositories.base import Storage
from energy_pros.services.engagement import Engagement, from_endorsement, from_reaction

__all__ = ["MemoryStorage"]


class MemoryStorage(Storage):
    """Arena of maps implementing the full storage interface."""

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self.users: dict[int, User] = {}
        self.posts: dict[int, Post] = {}
        self.reactions: dict[int, Reaction] = {}
        self.endorsements: dict[int, Endorsement] = {}
        self.comments: dict[int, Comment] = {}
        self.invites: dict[str, Invite] = {}
        self.profile_views: dict[int, ProfileView] = {}
        self._ids = {
            name: count(1)
            for name in ("users", "posts", "reactions", "endorsements", "comments", "invites", "views")
        }
        self._undo: list[Callable[[], None]] = []

    # Unit of work

    def commit(self) -> None:
        self._undo.clear()

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()

    def _insert(self, table: dict[Any, Any], key: Any, row: Any) -> None:
        table[key] = row
        self._undo.append(lambda: table.pop(key, None))

    def _remove(self, table: dict[Any, Any], key: Any) -> None:
        row = table.pop(key)
        self._undo.append(lambda: table.__setitem__(key, row))

    def _assign(self, row: Any, **values: Any) -> None:
        previous = {name: getattr(row, name) for name in values}

        def restore() -> None:
            for name, value in previous.items():
                setattr(row, name, value)

        for name, value in values.items():
            setattr(row, name, value)
        self._undo.append(restore)

    def _next_id(self, name: str) -> int:
        return next(self._ids[name])

    # Users

    def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return next((u for u in self.users.values() if u.username == username), None)

    def get_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_users(self, user_ids: Collection[int]) -> dict[int, User]:
        return {uid: self.users[uid] for uid in set(user_ids) if uid in self.users}

    def create_user(
        self,
        *,
        username: str,
        email: str,
        password: str,
        full_name: str,
        invited_by_user_id: int | None = None,
    ) -> User:
        user = User(
            id=self._next_id("users"),
            username=username,
            email=email,
            password=password,
            full_name=full_name,
            invited_by_user_id=invited_by_user_id,
        )
        self._insert(self.users, user.id, user)
        return user

    # Posts

    def create_post(
        self,
        *,
        content: str,
        hashtag: str,
        user_id: int | None,
        is_anonymous: bool,
        post_type: str,
        structured_data: dict[str, Any] | None,
    ) -> Post:
        now = self._clock()
        post = Post(
            id=self._next_id("posts"),
            content=content,
            hashtag=hashtag,
            user_id=user_id,
            is_anonymous=is_anonymous,
            type=post_type,
            structured_data=structured_data,
            created_at=now,
            updated_at=now,
        )
        self._insert(self.posts, post.id, post)
        return post

    def get_post(self, post_id: int) -> Post | None:
        return self.posts.get(post_id)

    def list_posts(
        self,
        *,
        hashtag: str | None = None,
        post_type: str | None = None,
        user_id: int | None = None,
        limit: int | None = None,
    ) -> list[Post]:
        posts = [
            post
            for post in self.posts.values()
            if (hashtag is None or post.hashtag == hashtag)
            and (post_type is None or post.type == post_type)
            and (user_id is None or post.user_id == user_id)
        ]
        posts.sort(key=lambda p: (as_utc(p.created_at), p.id), reverse=True)
        return posts[:limit] if limit is not None else posts

    def update_post_content(self, post: Post, content: str) -> Post:
        self._assign(post, content=content, updated_at=self._clock())
        return post

    def delete_post(self, post: Post) -> None:
        for table in (self.reactions, self.endorsements, self.comments):
            for key in [k for k, row in table.items() if row.post_id == post.id]:
                self._remove(table, key)
        self._remove(self.posts, post.id)

    def hashtag_post_counts(self) -> dict[str, int]:
        return dict(Counter(post.hashtag for post in self.posts.values()))

    # Reactions and endorsements

    def get_reaction(self, user_id: int, post_id: int) -> Reaction | None:
        return next(
            (r for r in self.reactions.values() if r.user_id == user_id and r.post_id == post_id),
            None,
        )

    def upsert_reaction(self, user_id: int, post_id: int, kind: str) -> tuple[Reaction, bool]:
        existing = self.get_reaction(user_id, post_id)
        if existing is not None:
            self._assign(existing, reaction=kind)
            return existing, False
        reaction = Reaction(
            id=self._next_id("reactions"),
            user_id=user_id,
            post_id=post_id,
            reaction=kind,
            created_at=self._clock(),
        )
        self._insert(self.reactions, reaction.id, reaction)
        return reaction, True

    def get_endorsement(self, user_id: int, post_id: int, hashtag: str) -> Endorsement | None:
        return next(
            (
                e
                for e in self.endorsements.values()
                if e.user_id == user_id and e.post_id == post_id and e.hashtag == hashtag
            ),
            None,
        )

    def create_endorsement(
        self, *, user_id: int, post_id: int, hashtag: str, endorsement_type: str
    ) -> Endorsement:
        endorsement = Endorsement(
            id=self._next_id("endorsements"),
            user_id=user_id,
            post_id=post_id,
            hashtag=hashtag,
            type=endorsement_type,
        )
        self._insert(self.endorsements, endorsement.id, endorsement)
        return endorsement

    def update_endorsement_type(self, endorsement: Endorsement, endorsement_type: str) -> Endorsement:
        self._assign(endorsement, type=endorsement_type)
        return endorsement

    def list_engagements(self, post_ids: Collection[int] | None = None) -> list[Engagement]:
        wanted = set(post_ids) if post_ids is not None else None

        def selected(post_id: int) -> bool:
            return post_id in self.posts and (wanted is None or post_id in wanted)

        engagements = [
            from_reaction(
                post_id=r.post_id,
                user_id=r.user_id,
                reaction=r.reaction,
                hashtag=self.posts[r.post_id].hashtag,
            )
            for r in self.reactions.values()
            if selected(r.post_id)
        ]
        engagements.extend(
            from_endorsement(
                post_id=e.post_id,
                user_id=e.user_id,
                legacy_type=e.type,
                hashtag=self.posts[e.post_id].hashtag,
            )
            for e in self.endorsements.values()
            if selected(e.post_id)
        )
        return engagements

    # Comments

    def create_comment(self, *, post_id: int, user_id: int, content: str) -> Comment:
        comment = Comment(
            id=self._next_id("comments"),
            post_id=post_id,
            user_id=user_id,
            content=content,
            created_at=self._clock(),
        )
        self._insert(self.comments, comment.id, comment)
        return comment

    def list_comments(self, post_id: int) -> list[Comment]:
        comments = [c for c in self.comments.values() if c.post_id == post_id]
        comments.sort(key=lambda c: (as_utc(c.created_at), c.id))
        return comments

    def count_comments(self, post_ids: Collection[int]) -> dict[int, int]:
        wanted = set(post_ids)
        return dict(Counter(c.post_id for c in self.comments.values() if c.post_id in wanted))

    # Invites

    def create_invite(self, *, code: str, invited_by_user_id: int) -> Invite:
        if code in self.invites:
            raise ValueError(f"Invite code {code!r} already exists")
        invite = Invite(
            id=self._next_id("invites"),
            code=code,
            invited_by_user_id=invited_by_user_id,
            used_by_user_id=None,
            used_at=None,
        )
        self._insert(self.invites, code, invite)
        return invite

    def get_invite(self, code: str) -> Invite | None:
        return self.invites.get(code)

    def mark_invite_used(self, invite: Invite, used_by_user_id: int, used_at: datetime) -> Invite:
        self._assign(invite, used_by_user_id=used_by_user_id, used_at=used_at)
        return invite

    # Profile views

    def find_profile_view_since(
        self, viewer_id: int, profile_user_id: int, since: datetime
    ) -> ProfileView | None:
        return next(
            (
                v
                for v in self.profile_views.values()
                if v.viewer_id == viewer_id
                and v.profile_user_id == profile_user_id
                and as_utc(v.viewed_at) >= as_utc(since)
            ),
            None,
        )

    def add_profile_view(
        self, viewer_id: int, profile_user_id: int, viewed_at: datetime
    ) -> ProfileView:
        view = ProfileView(
            id=self._next_id("views"),
            viewer_id=viewer_id,
            profile_user_id=profile_user_id,
            viewed_at=viewed_at,
        )
        self._insert(self.profile_views, view.id, view)
        return view

    def count_profile_views(self, profile_user_id: int) -> int:
        return sum(1 for v in self.profile_views.values() if v.profile_user_id == profile_user_id)

    def list_profile_views(
        self,
        profile_user_id: int,
        *,
        limit: int | None = None,
        since: datetime | None = None,
    ) -> list[ProfileView]:
        views = [
            v
            for v in self.profile_views.values()
            if v.profile_user_id == profile_user_id
            and (since is None or as_utc(v.viewed_at) >= as_utc(since))
        ]
        views.sort(key=lambda v: (as_utc(v.viewed_at), v.id), reverse=True)
        return views[:limit] if limit is not None else views
