"""Models capturing engagement on posts: reactions and legacy endorsements."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from energy_pros.db.session import Base
from energy_pros.db.time import utcnow

REACTION_KINDS = ("like", "love", "haha", "wow", "sad", "angry")
ENDORSEMENT_TYPES = ("positive", "negative")


class Reaction(Base):
    """Per-user emotion reaction on a post.

    The unique constraint makes a second reaction from the same user an
    update of the existing row.
    """

    __tablename__ = "reactions"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_reactions_user_post"),
        CheckConstraint(
            "reaction IN ('like', 'love', 'haha', 'wow', 'sad', 'angry')",
            name="ck_reactions_kind",
        ),
        Index("ix_reactions_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    reaction: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class Endorsement(Base):
    """Legacy thumbs up/down on a post, scoped by the post's hashtag.

    ``hashtag`` is a copy of the post's hashtag at creation time. ``type`` is
    normally positive/negative but older rows may hold a reaction kind.
    """

    __tablename__ = "endorsements"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "post_id", "hashtag", name="uq_endorsements_user_post_hashtag"
        ),
        Index("ix_endorsements_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    hashtag: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="positive")
