"""Reaction and endorsement request schemas."""

from typing import Literal

from pydantic import Field

from energy_pros.schemas.common import CamelModel

ReactionKind = Literal["like", "love", "haha", "wow", "sad", "angry"]


class ReactionCreate(CamelModel):
    """Set or replace the caller's reaction on a post."""

    post_id: int
    reaction: ReactionKind


class ReactionResult(CamelModel):
    message: str
    post_id: int
    reaction: ReactionKind


class EndorsementCreate(CamelModel):
    """Legacy thumbs up/down on a post."""

    post_id: int
    type: Literal["positive", "negative"] = Field("positive")


class EndorsementResult(CamelModel):
    message: str
    id: int
    post_id: int
    hashtag: str
    type: str
