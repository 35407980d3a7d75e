# src/energy_pros/api/v1/endpoints/hashtags.py
"""Hashtag listing and trending endpoints."""

from fastapi import APIRouter, Query

from energy_pros.core.settings import settings
from energy_pros.repositories import StorageDep
from energy_pros.schemas.hashtag import HashtagAnalyticsResponse, HashtagCountResponse
from energy_pros.services.aggregation import AggregationService, HashtagCount

router = APIRouter(prefix="/hashtags", tags=["hashtags"])


def _to_response(items: list[HashtagCount]) -> list[HashtagCountResponse]:
    return [HashtagCountResponse(hashtag=item.hashtag, count=item.count) for item in items]


@router.get("/common", response_model=list[str])
async def common_hashtags() -> list[str]:
    """The configured list of suggested hashtags."""
    return list(settings.common_hashtags)


@router.get("/trending", response_model=list[HashtagCountResponse])
async def trending_hashtags(
    storage: StorageDep,
    limit: int | None = Query(None, ge=1, le=100),
) -> list[HashtagCountResponse]:
    """Hashtags with the most posts."""
    limit = limit or settings.trending_default_limit
    return _to_response(AggregationService(storage).trending_by_posts(limit))


@router.get("/analytics", response_model=HashtagAnalyticsResponse)
async def hashtag_analytics(
    storage: StorageDep,
    limit: int | None = Query(None, ge=1, le=100),
) -> HashtagAnalyticsResponse:
    """Compare the post-count and reaction-count rankings."""
    limit = limit or settings.trending_default_limit
    analytics = AggregationService(storage).hashtag_analytics(limit)
    return HashtagAnalyticsResponse(
        limit=limit,
        trending_by_posts=_to_response(analytics.by_posts),
        trending_by_reactions=_to_response(analytics.by_engagements),
        total_posts=analytics.total_posts,
        total_reactions=analytics.total_engagements,
    )
