"""Hashtag ranking schemas."""

from energy_pros.schemas.common import CamelModel


class HashtagCountResponse(CamelModel):
    hashtag: str
    count: int


class HashtagAnalyticsResponse(CamelModel):
    """Post-count and reaction-count rankings side by side."""

    limit: int
    trending_by_posts: list[HashtagCountResponse]
    trending_by_reactions: list[HashtagCountResponse]
    total_posts: int
    total_reactions: int
