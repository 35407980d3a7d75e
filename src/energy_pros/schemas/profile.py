"""Profile and profile-analytics schemas."""

from datetime import datetime

from energy_pros.schemas.common import CamelModel
from energy_pros.schemas.hashtag import HashtagCountResponse
from energy_pros.schemas.post import PostResponse
from energy_pros.schemas.user import UserPublic


class ProfileResponse(CamelModel):
    user: UserPublic
    posts: list[PostResponse]
    endorsement_stats: list[HashtagCountResponse]
    view_count: int


class ProfileViewerResponse(CamelModel):
    viewer: UserPublic | None
    viewed_at: datetime


class DailyViewCount(CamelModel):
    date: str
    count: int


class ProfileAnalyticsResponse(CamelModel):
    total_views: int
    recent_views: list[DailyViewCount]
    period: str
