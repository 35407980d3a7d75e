"""Service-level helpers for creating, editing and presenting posts."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from energy_pros.models import Post
from energy_pros.models.post import POST_TYPE_EVENT, POST_TYPE_GENERAL, POST_TYPE_JOB
from energy_pros.repositories.base import Storage
from energy_pros.schemas.post import (
    EventPostCreate,
    GeneralPostCreate,
    JobPostCreate,
    PostResponse,
    normalize_hashtag,
)
from energy_pros.schemas.user import UserPublic
from energy_pros.services.aggregation import AggregationService, ReactionSummary
from energy_pros.services.errors import PermissionDenied, ValidationFailed

logger = logging.getLogger(__name__)

# (min, max) content length per post type.
CONTENT_LIMITS: dict[str, tuple[int, int]] = {
    POST_TYPE_GENERAL: (5, 500),
    POST_TYPE_JOB: (5, 2000),
    POST_TYPE_EVENT: (5, 2000),
}


def create_post(
    storage: Storage,
    *,
    author_id: int,
    data: GeneralPostCreate | JobPostCreate | EventPostCreate,
) -> Post:
    """Persist a validated post for its author."""
    structured = (
        data.structured_data.model_dump(by_alias=True, exclude_none=True)
        if data.structured_data is not None
        else None
    )
    post = storage.create_post(
        content=data.content,
        hashtag=normalize_hashtag(data.hashtag),
        user_id=author_id,
        is_anonymous=data.is_anonymous,
        post_type=data.type,
        structured_data=structured,
    )
    logger.info("User %s created %s post %s under %s", author_id, post.type, post.id, post.hashtag)
    return post


def check_content_length(post_type: str, content: str) -> None:
    """Apply the content-length rule of the post's type."""
    low, high = CONTENT_LIMITS.get(post_type, CONTENT_LIMITS[POST_TYPE_GENERAL])
    if not low <= len(content) <= high:
        raise ValidationFailed(
            f"content: must be between {low} and {high} characters for {post_type} posts"
        )


def update_post(storage: Storage, post: Post, *, actor_id: int, content: str) -> Post:
    """Replace the content of a post; only its author may do so."""
    if post.user_id != actor_id:
        raise PermissionDenied("You are not authorized to edit this post")
    check_content_length(post.type, content)
    return storage.update_post_content(post, content)


def delete_post(storage: Storage, post: Post, *, actor_id: int) -> None:
    """Delete a post and everything attached to it; only its author may do so."""
    if post.user_id != actor_id:
        raise PermissionDenied("You are not authorized to delete this post")
    storage.delete_post(post)
    logger.info("User %s deleted post %s", actor_id, post.id)


def present_posts(
    storage: Storage, posts: Sequence[Post], viewer_id: int | None = None
) -> list[PostResponse]:
    """Enrich posts with reaction stats, comment counts and visible authors."""
    if not posts:
        return []
    post_ids = [post.id for post in posts]
    summaries = AggregationService(storage).summaries_for_posts(post_ids, viewer_id)
    comment_counts = storage.count_comments(post_ids)
    authors = storage.get_users(
        {post.user_id for post in posts if post.user_id is not None and not post.is_anonymous}
    )

    results: list[PostResponse] = []
    for post in posts:
        summary = summaries.get(post.id, ReactionSummary())
        author = None if post.is_anonymous else authors.get(post.user_id or -1)
        results.append(
            PostResponse(
                id=post.id,
                content=post.content,
                hashtag=post.hashtag,
                user_id=None if post.is_anonymous else post.user_id,
                is_anonymous=post.is_anonymous,
                type=post.type,
                structured_data=post.structured_data,
                created_at=post.created_at,
                updated_at=post.updated_at,
                user=UserPublic.model_validate(author) if author is not None else None,
                comment_count=comment_counts.get(post.id, 0),
                reactions=summary.reactions,
                reaction_count=summary.reaction_count,
                like_count=summary.like_count,
                angry_count=summary.angry_count,
                current_user_reaction=summary.current_user_reaction,
            )
        )
    return results


def present_post(storage: Storage, post: Post, viewer_id: int | None = None) -> PostResponse:
    return present_posts(storage, [post], viewer_id)[0]
