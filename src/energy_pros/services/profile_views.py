"""Profile visit recording and analytics."""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from energy_pros.core.settings import settings
from energy_pros.db.time import as_utc, utcnow
from energy_pros.models import ProfileView, User
from energy_pros.repositories.base import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileVisit:
    viewer: User | None
    viewed_at: datetime


@dataclass(frozen=True)
class DailyViews:
    date: str
    count: int


class ProfileViewTracker:
    """Records who looked at a profile and answers the owner's analytics queries.

    A (viewer, profile) pair produces at most one row per rolling window;
    repeat visits inside the window are dropped, not merged. Callers are
    responsible for restricting the read methods to the profile owner.
    """

    def __init__(
        self,
        storage: Storage,
        *,
        window_seconds: int | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.storage = storage
        self.window = timedelta(
            seconds=window_seconds if window_seconds is not None else settings.profile_view_dedup_seconds
        )
        self.clock = clock

    def record_view(self, viewer_id: int, profile_user_id: int) -> ProfileView | None:
        """Store a visit unless it is a self-view or a repeat inside the window."""
        if viewer_id == profile_user_id:
            return None
        now = self.clock()
        recent = self.storage.find_profile_view_since(viewer_id, profile_user_id, now - self.window)
        if recent is not None:
            return None
        view = self.storage.add_profile_view(viewer_id, profile_user_id, now)
        logger.debug("Recorded profile view %s -> %s", viewer_id, profile_user_id)
        return view

    def view_count(self, profile_user_id: int) -> int:
        return self.storage.count_profile_views(profile_user_id)

    def viewers(self, profile_user_id: int, limit: int = 10) -> list[ProfileVisit]:
        """Most recent visits, newest first; a viewer may appear once per window."""
        views = self.storage.list_profile_views(profile_user_id, limit=limit)
        users = self.storage.get_users({view.viewer_id for view in views})
        return [
            ProfileVisit(viewer=users.get(view.viewer_id), viewed_at=as_utc(view.viewed_at))
            for view in views
        ]

    def recent_views(self, profile_user_id: int, days: int = 7) -> list[DailyViews]:
        """Visits over the trailing ``days`` bucketed by UTC calendar date, oldest first."""
        since = self.clock() - timedelta(days=days)
        views = self.storage.list_profile_views(profile_user_id, since=since)
        buckets = Counter(as_utc(view.viewed_at).date().isoformat() for view in views)
        return [DailyViews(date=date, count=count) for date, count in sorted(buckets.items())]
