# src/energy_pros/api/v1/endpoints/engagement.py
"""Reaction and legacy endorsement endpoints."""

from fastapi import APIRouter, Response, status

from energy_pros.api.v1.dependencies import CurrentUserDep, get_post_or_404
from energy_pros.repositories import StorageDep
from energy_pros.schemas.engagement import (
    EndorsementCreate,
    EndorsementResult,
    ReactionCreate,
    ReactionResult,
)
from energy_pros.services.reactions import endorse, set_reaction

router = APIRouter(tags=["engagement"])


@router.post("/reactions", response_model=ReactionResult, status_code=status.HTTP_201_CREATED)
async def react(
    request: ReactionCreate,
    response: Response,
    storage: StorageDep,
    current_user: CurrentUserDep,
) -> ReactionResult:
    """Set the caller's reaction on a post, replacing any earlier kind.

    Answers 201 when the reaction is new and 200 when an existing one was
    overwritten, including with the same kind.
    """
    post = get_post_or_404(storage, request.post_id)
    reaction, created = set_reaction(
        storage, user_id=current_user.id, post=post, kind=request.reaction
    )
    storage.commit()
    if not created:
        response.status_code = status.HTTP_200_OK
    return ReactionResult(
        message="Reaction added" if created else "Reaction updated",
        post_id=post.id,
        reaction=reaction.reaction,
    )


@router.post(
    "/endorsements", response_model=EndorsementResult, status_code=status.HTTP_201_CREATED
)
async def create_endorsement(
    request: EndorsementCreate,
    response: Response,
    storage: StorageDep,
    current_user: CurrentUserDep,
) -> EndorsementResult:
    """Legacy thumbs up/down; repeating the same type is rejected."""
    post = get_post_or_404(storage, request.post_id)
    endorsement, created = endorse(
        storage, user_id=current_user.id, post=post, endorsement_type=request.type
    )
    storage.commit()
    if not created:
        response.status_code = status.HTTP_200_OK
    return EndorsementResult(
        message="Endorsement added" if created else "Endorsement updated",
        id=endorsement.id,
        post_id=endorsement.post_id,
        hashtag=endorsement.hashtag,
        type=endorsement.type,
    )
