# src/energy_pros/api/v1/endpoints/users.py
"""Member profile and profile-analytics endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from energy_pros.api.v1.dependencies import CurrentUserDep, SessionContextDep
from energy_pros.models import User
from energy_pros.repositories import StorageDep
from energy_pros.repositories.base import Storage
from energy_pros.schemas.hashtag import HashtagCountResponse
from energy_pros.schemas.profile import (
    DailyViewCount,
    ProfileAnalyticsResponse,
    ProfileResponse,
    ProfileViewerResponse,
)
from energy_pros.schemas.user import UserPublic
from energy_pros.services.aggregation import AggregationService
from energy_pros.services.posts import present_posts
from energy_pros.services.profile_views import ProfileViewTracker

router = APIRouter(prefix="/users", tags=["users"])


def _get_user_or_404(storage: Storage, user_id: int) -> User:
    user = storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _require_owner(current_user: User, user_id: int) -> None:
    if current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own profile analytics",
        )


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def get_profile(
    user_id: int,
    storage: StorageDep,
    context: SessionContextDep,
) -> ProfileResponse:
    """Public profile: identity, named posts, hashtag reputation and view count.

    Viewing someone else's profile while signed in records a visit.
    """
    user = _get_user_or_404(storage, user_id)
    if context.is_authenticated:
        ProfileViewTracker(storage).record_view(context.user_id, user_id)
        storage.commit()

    posts = [post for post in storage.list_posts(user_id=user_id) if not post.is_anonymous]
    reputation = AggregationService(storage).hashtag_reputation(user_id)
    return ProfileResponse(
        user=UserPublic.model_validate(user),
        posts=present_posts(storage, posts, context.user_id),
        endorsement_stats=[
            HashtagCountResponse(hashtag=item.hashtag, count=item.count) for item in reputation
        ],
        view_count=ProfileViewTracker(storage).view_count(user_id),
    )


@router.get("/{user_id}/profile-viewers", response_model=list[ProfileViewerResponse])
async def get_profile_viewers(
    user_id: int,
    storage: StorageDep,
    current_user: CurrentUserDep,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of visits to return"),
) -> list[ProfileViewerResponse]:
    """Most recent visitors of the caller's own profile, newest first."""
    _require_owner(current_user, user_id)
    visits = ProfileViewTracker(storage).viewers(user_id, limit=limit)
    return [
        ProfileViewerResponse(
            viewer=UserPublic.model_validate(visit.viewer) if visit.viewer is not None else None,
            viewed_at=visit.viewed_at,
        )
        for visit in visits
    ]


@router.get("/{user_id}/profile-analytics", response_model=ProfileAnalyticsResponse)
async def get_profile_analytics(
    user_id: int,
    storage: StorageDep,
    current_user: CurrentUserDep,
    days: int = Query(7, ge=1, le=365, description="Length of the trailing window in days"),
) -> ProfileAnalyticsResponse:
    """Total visits plus a per-day breakdown over the trailing window."""
    _require_owner(current_user, user_id)
    tracker = ProfileViewTracker(storage)
    return ProfileAnalyticsResponse(
        total_views=tracker.view_count(user_id),
        recent_views=[
            DailyViewCount(date=bucket.date, count=bucket.count)
            for bucket in tracker.recent_views(user_id, days=days)
        ],
        period=f"{days} days",
    )
