# src/energy_pros/api/v1/endpoints/posts.py
"""Post, comment and per-post reaction endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, HTTPException, Query, status

from energy_pros.api.v1.dependencies import CurrentUserDep, SessionContextDep, get_post_or_404
from energy_pros.models import Comment
from energy_pros.models.post import POST_TYPES
from energy_pros.repositories import StorageDep
from energy_pros.repositories.base import Storage
from energy_pros.schemas.comment import CommentCreate, CommentResponse
from energy_pros.schemas.post import (
    PostCreate,
    PostResponse,
    PostUpdate,
    ReactionStats,
    normalize_hashtag,
)
from energy_pros.schemas.user import UserPublic
from energy_pros.services import posts as post_service
from energy_pros.services.aggregation import AggregationService

router = APIRouter(prefix="/posts", tags=["posts"])


def _present_comment(storage: Storage, comment: Comment) -> CommentResponse:
    author = storage.get_user(comment.user_id)
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        user=UserPublic.model_validate(author) if author is not None else None,
    )


@router.get("", response_model=list[PostResponse])
async def list_posts(
    storage: StorageDep,
    context: SessionContextDep,
    hashtag: str | None = Query(None, description="Filter by hashtag, with or without '#'"),
    post_type: str | None = Query(None, alias="type", description="Filter by post type"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of posts to return"),
) -> list[PostResponse]:
    """List posts newest first with reaction stats for the caller."""
    if post_type is not None and post_type not in POST_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"type: must be one of {', '.join(POST_TYPES)}",
        )
    tag = None
    if hashtag is not None and hashtag.strip().lstrip("#").strip():
        tag = normalize_hashtag(hashtag)

    posts = storage.list_posts(hashtag=tag, post_type=post_type, limit=limit)
    return post_service.present_posts(storage, posts, context.user_id)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, storage: StorageDep, context: SessionContextDep) -> PostResponse:
    """Return one enriched post."""
    post = get_post_or_404(storage, post_id)
    return post_service.present_post(storage, post, context.user_id)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: Annotated[PostCreate, Body()],
    storage: StorageDep,
    current_user: CurrentUserDep,
) -> PostResponse:
    """Create a general, job or event post."""
    post = post_service.create_post(storage, author_id=current_user.id, data=post_data)
    storage.commit()
    return post_service.present_post(storage, post, current_user.id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    update: PostUpdate,
    storage: StorageDep,
    current_user: CurrentUserDep,
) -> PostResponse:
    """Edit the content of one's own post."""
    post = get_post_or_404(storage, post_id)
    post_service.update_post(storage, post, actor_id=current_user.id, content=update.content)
    storage.commit()
    return post_service.present_post(storage, post, current_user.id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, storage: StorageDep, current_user: CurrentUserDep) -> None:
    """Delete one's own post together with its engagement and comments."""
    post = get_post_or_404(storage, post_id)
    post_service.delete_post(storage, post, actor_id=current_user.id)
    storage.commit()


@router.get("/{post_id}/reactions", response_model=ReactionStats)
async def get_post_reactions(
    post_id: int, storage: StorageDep, context: SessionContextDep
) -> ReactionStats:
    """Histogram of reactions on a post plus the caller's own reaction."""
    get_post_or_404(storage, post_id)
    summary = AggregationService(storage).post_reactions(post_id, context.user_id)
    return ReactionStats(
        reactions=summary.reactions,
        reaction_count=summary.reaction_count,
        like_count=summary.like_count,
        angry_count=summary.angry_count,
        current_user_reaction=summary.current_user_reaction,
    )


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: int, storage: StorageDep) -> list[CommentResponse]:
    """Comments on a post, oldest first."""
    get_post_or_404(storage, post_id)
    return [_present_comment(storage, comment) for comment in storage.list_comments(post_id)]


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    storage: StorageDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    """Add a comment to a post."""
    get_post_or_404(storage, post_id)
    comment = storage.create_comment(
        post_id=post_id, user_id=current_user.id, content=comment_data.content
    )
    storage.commit()
    return _present_comment(storage, comment)
