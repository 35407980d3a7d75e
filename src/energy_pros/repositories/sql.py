"""Relational storage backed by a SQLAlchemy session."""
from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from energy_pros.models import Comment, Endorsement, Invite, Post, ProfileView, Reaction, User
from energy_pros.repositories.base import Storage
from energy_pros.services.engagement import Engagement, from_endorsement, from_reaction

__all__ = ["SqlStorage"]

logger = logging.getLogger(__name__)


class SqlStorage(Storage):
    """Thin wrapper around database access for every entity."""

    def __init__(self, session: Session) -> None:
        """Initialize the storage with a SQLAlchemy session."""
        self.session = session

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def close(self) -> None:
        self.session.close()

    # Users

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.session.scalars(select(User).where(User.username == username)).first()

    def get_user_by_email(self, email: str) -> User | None:
        return self.session.scalars(select(User).where(User.email == email)).first()

    def get_users(self, user_ids: Collection[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        users = self.session.scalars(select(User).where(User.id.in_(set(user_ids))))
        return {user.id: user for user in users}

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
            username=username,
            email=email,
            password=password,
            full_name=full_name,
            invited_by_user_id=invited_by_user_id,
        )
        self.session.add(user)
        self.session.flush()
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
        post = Post(
            content=content,
            hashtag=hashtag,
            user_id=user_id,
            is_anonymous=is_anonymous,
            type=post_type,
            structured_data=structured_data,
        )
        self.session.add(post)
        self.session.flush()
        return post

    def get_post(self, post_id: int) -> Post | None:
        return self.session.get(Post, post_id)

    def list_posts(
        self,
        *,
        hashtag: str | None = None,
        post_type: str | None = None,
        user_id: int | None = None,
        limit: int | None = None,
    ) -> list[Post]:
        stmt = select(Post)
        if hashtag is not None:
            stmt = stmt.where(Post.hashtag == hashtag)
        if post_type is not None:
            stmt = stmt.where(Post.type == post_type)
        if user_id is not None:
            stmt = stmt.where(Post.user_id == user_id)
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))

    def update_post_content(self, post: Post, content: str) -> Post:
        post.content = content
        self.session.flush()
        return post

    def delete_post(self, post: Post) -> None:
        # SQLite does not enforce ON DELETE CASCADE unless asked to, so clear children here.
        for model in (Reaction, Endorsement, Comment):
            self.session.execute(delete(model).where(model.post_id == post.id))
        self.session.delete(post)
        self.session.flush()

    def hashtag_post_counts(self) -> dict[str, int]:
        rows = self.session.execute(
            select(Post.hashtag, func.count(Post.id)).group_by(Post.hashtag)
        ).all()
        return {hashtag: int(count) for hashtag, count in rows}

    # Reactions and endorsements

    def get_reaction(self, user_id: int, post_id: int) -> Reaction | None:
        return self.session.scalars(
            select(Reaction).where(Reaction.user_id == user_id, Reaction.post_id == post_id)
        ).first()

    def upsert_reaction(self, user_id: int, post_id: int, kind: str) -> tuple[Reaction, bool]:
        existing = self.get_reaction(user_id, post_id)
        if existing is not None:
            existing.reaction = kind
            self.session.flush()
            return existing, False

        reaction = Reaction(user_id=user_id, post_id=post_id, reaction=kind)
        try:
            with self.session.begin_nested():
                self.session.add(reaction)
        except IntegrityError:
            # A concurrent request inserted the row first; fall back to updating it.
            logger.info("Reaction insert raced for user %s on post %s", user_id, post_id)
            existing = self.get_reaction(user_id, post_id)
            if existing is None:
                raise
            existing.reaction = kind
            self.session.flush()
            return existing, False
        return reaction, True

    def get_endorsement(self, user_id: int, post_id: int, hashtag: str) -> Endorsement | None:
        return self.session.scalars(
            select(Endorsement).where(
                Endorsement.user_id == user_id,
                Endorsement.post_id == post_id,
                Endorsement.hashtag == hashtag,
            )
        ).first()

    def create_endorsement(
        self, *, user_id: int, post_id: int, hashtag: str, endorsement_type: str
    ) -> Endorsement:
        endorsement = Endorsement(
            user_id=user_id, post_id=post_id, hashtag=hashtag, type=endorsement_type
        )
        self.session.add(endorsement)
        self.session.flush()
        return endorsement

    def update_endorsement_type(self, endorsement: Endorsement, endorsement_type: str) -> Endorsement:
        endorsement.type = endorsement_type
        self.session.flush()
        return endorsement

    def list_engagements(self, post_ids: Collection[int] | None = None) -> list[Engagement]:
        reaction_stmt = (
            select(Reaction.post_id, Reaction.user_id, Reaction.reaction, Post.hashtag)
            .join(Post, Post.id == Reaction.post_id)
            .order_by(Reaction.id)
        )
        endorsement_stmt = (
            select(Endorsement.post_id, Endorsement.user_id, Endorsement.type, Post.hashtag)
            .join(Post, Post.id == Endorsement.post_id)
            .order_by(Endorsement.id)
        )
        if post_ids is not None:
            if not post_ids:
                return []
            ids = set(post_ids)
            reaction_stmt = reaction_stmt.where(Reaction.post_id.in_(ids))
            endorsement_stmt = endorsement_stmt.where(Endorsement.post_id.in_(ids))

        engagements = [
            from_reaction(post_id=post_id, user_id=user_id, reaction=kind, hashtag=hashtag)
            for post_id, user_id, kind, hashtag in self.session.execute(reaction_stmt)
        ]
        engagements.extend(
            from_endorsement(post_id=post_id, user_id=user_id, legacy_type=kind, hashtag=hashtag)
            for post_id, user_id, kind, hashtag in self.session.execute(endorsement_stmt)
        )
        return engagements

    # Comments

    def create_comment(self, *, post_id: int, user_id: int, content: str) -> Comment:
        comment = Comment(post_id=post_id, user_id=user_id, content=content)
        self.session.add(comment)
        self.session.flush()
        return comment

    def list_comments(self, post_id: int) -> list[Comment]:
        return list(
            self.session.scalars(
                select(Comment)
                .where(Comment.post_id == post_id)
                .order_by(Comment.created_at.asc(), Comment.id.asc())
            )
        )

    def count_comments(self, post_ids: Collection[int]) -> dict[int, int]:
        if not post_ids:
            return {}
        rows = self.session.execute(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(set(post_ids)))
            .group_by(Comment.post_id)
        ).all()
        return {post_id: int(count) for post_id, count in rows}

    # Invites

    def create_invite(self, *, code: str, invited_by_user_id: int) -> Invite:
        invite = Invite(code=code, invited_by_user_id=invited_by_user_id)
        self.session.add(invite)
        self.session.flush()
        return invite

    def get_invite(self, code: str) -> Invite | None:
        return self.session.scalars(select(Invite).where(Invite.code == code)).first()

    def mark_invite_used(self, invite: Invite, used_by_user_id: int, used_at: datetime) -> Invite:
        invite.used_by_user_id = used_by_user_id
        invite.used_at = used_at
        self.session.flush()
        return invite

    # Profile views

    def find_profile_view_since(
        self, viewer_id: int, profile_user_id: int, since: datetime
    ) -> ProfileView | None:
        return self.session.scalars(
            select(ProfileView)
            .where(
                ProfileView.viewer_id == viewer_id,
                ProfileView.profile_user_id == profile_user_id,
                ProfileView.viewed_at >= since,
            )
            .limit(1)
        ).first()

    def add_profile_view(
        self, viewer_id: int, profile_user_id: int, viewed_at: datetime
    ) -> ProfileView:
        view = ProfileView(viewer_id=viewer_id, profile_user_id=profile_user_id, viewed_at=viewed_at)
        self.session.add(view)
        self.session.flush()
        return view

    def count_profile_views(self, profile_user_id: int) -> int:
        count = self.session.scalar(
            select(func.count(ProfileView.id)).where(ProfileView.profile_user_id == profile_user_id)
        )
        return int(count or 0)

    def list_profile_views(
        self,
        profile_user_id: int,
        *,
        limit: int | None = None,
        since: datetime | None = None,
    ) -> list[ProfileView]:
        stmt = select(ProfileView).where(ProfileView.profile_user_id == profile_user_id)
        if since is not None:
            stmt = stmt.where(ProfileView.viewed_at >= since)
        stmt = stmt.order_by(ProfileView.viewed_at.desc(), ProfileView.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.scalars(stmt))
