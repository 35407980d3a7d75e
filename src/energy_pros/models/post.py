"""SQLAlchemy models for posts and related attributes."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from energy_pros.db.session import Base
from energy_pros.db.time import utcnow

POST_TYPE_GENERAL = "general"
POST_TYPE_JOB = "job"
POST_TYPE_EVENT = "event"
POST_TYPES = (POST_TYPE_GENERAL, POST_TYPE_JOB, POST_TYPE_EVENT)


class Post(Base):
    """Primary content entity produced by members.

    Every post carries exactly one hashtag, always stored with a leading "#".
    Anonymous posts keep ``user_id`` so the author can still edit or delete
    them; the API hides it on the way out.
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    hashtag: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )
    is_anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # general | job | event
    type: Mapped[str] = mapped_column(String(20), default=POST_TYPE_GENERAL, nullable=False)
    structured_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
