"""Unified view over reactions and legacy endorsements.

Both tables describe the same thing (a member's reaction to a post), so the
aggregation code works on a single ``Engagement`` value and never touches the
storage rows directly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from energy_pros.models.engagement import REACTION_KINDS

LEGACY_TYPE_TO_REACTION = {
    "positive": "like",
    "negative": "angry",
}


class EngagementSource(str, Enum):
    """Which storage table an engagement was read from."""

    REACTION = "reaction"
    ENDORSEMENT = "endorsement"


@dataclass(frozen=True)
class Engagement:
    """A single member's reaction to a post, regardless of where it is stored."""

    post_id: int
    user_id: int
    kind: str
    source: EngagementSource
    hashtag: str | None = None


def reaction_kind_for_legacy_type(legacy_type: str | None) -> str:
    """Map a legacy endorsement type onto the reaction vocabulary.

    Older rows sometimes stored a reaction kind directly; those pass through.
    Anything unrecognised counts as a like.
    """
    if not legacy_type:
        return "like"
    if legacy_type in LEGACY_TYPE_TO_REACTION:
        return LEGACY_TYPE_TO_REACTION[legacy_type]
    if legacy_type in REACTION_KINDS:
        return legacy_type
    return "like"


def from_reaction(
    *, post_id: int, user_id: int, reaction: str, hashtag: str | None = None
) -> Engagement:
    return Engagement(
        post_id=post_id,
        user_id=user_id,
        kind=reaction,
        source=EngagementSource.REACTION,
        hashtag=hashtag,
    )


def from_endorsement(
    *, post_id: int, user_id: int, legacy_type: str, hashtag: str | None = None
) -> Engagement:
    return Engagement(
        post_id=post_id,
        user_id=user_id,
        kind=reaction_kind_for_legacy_type(legacy_type),
        source=EngagementSource.ENDORSEMENT,
        hashtag=hashtag,
    )


def merge_engagements(engagements: Iterable[Engagement]) -> list[Engagement]:
    """Collapse engagements to one per (user, post), preferring reactions.

    A member who endorsed a post under the legacy model and later reacted to
    it is counted once, with the reaction's kind. Input order is preserved for
    the surviving rows.
    """
    chosen: dict[tuple[int, int], Engagement] = {}
    for engagement in engagements:
        key = (engagement.user_id, engagement.post_id)
        current = chosen.get(key)
        if current is None:
            chosen[key] = engagement
        elif (
            current.source is EngagementSource.ENDORSEMENT
            and engagement.source is EngagementSource.REACTION
        ):
            chosen[key] = engagement
    return list(chosen.values())
