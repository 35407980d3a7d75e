"""Profile visit records used for view analytics."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from energy_pros.db.session import Base
from energy_pros.db.time import utcnow


class ProfileView(Base):
    """One visit of ``viewer_id`` to the profile of ``profile_user_id``."""

    __tablename__ = "profile_views"
    __table_args__ = (
        Index("ix_profile_views_profile_viewed_at", "profile_user_id", "viewed_at"),
        Index("ix_profile_views_viewer_profile", "viewer_id", "profile_user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    viewer_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    profile_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    viewed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
