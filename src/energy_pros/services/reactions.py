"""Write paths for reactions and legacy endorsements.

The two paths deliberately differ on repeats: re-submitting the same
reaction kind succeeds silently, while re-submitting the same endorsement
type is rejected.
"""
from __future__ import annotations

import logging

from energy_pros.models import Endorsement, Post, Reaction
from energy_pros.models.engagement import ENDORSEMENT_TYPES, REACTION_KINDS
from energy_pros.repositories.base import Storage
from energy_pros.services.errors import Conflict, ValidationFailed

logger = logging.getLogger(__name__)

_ENDORSEMENT_LABELS = {"positive": "thumbs up", "negative": "thumbs down"}


def set_reaction(storage: Storage, *, user_id: int, post: Post, kind: str) -> tuple[Reaction, bool]:
    """Insert the member's reaction or overwrite the kind of the existing one.

    Returns the row and whether it was newly created.
    """
    if kind not in REACTION_KINDS:
        raise ValidationFailed("Invalid reaction type")
    reaction, created = storage.upsert_reaction(user_id, post.id, kind)
    logger.debug(
        "%s reaction %s by user %s on post %s",
        "Created" if created else "Updated",
        kind,
        user_id,
        post.id,
    )
    return reaction, created


def endorse(
    storage: Storage, *, user_id: int, post: Post, endorsement_type: str
) -> tuple[Endorsement, bool]:
    """Record a legacy endorsement scoped by the post's hashtag.

    A different type replaces the existing endorsement; the same type again
    raises ``Conflict``.
    """
    if endorsement_type not in ENDORSEMENT_TYPES:
        raise ValidationFailed("Invalid endorsement type. Must be 'positive' or 'negative'")

    existing = storage.get_endorsement(user_id, post.id, post.hashtag)
    if existing is not None:
        if existing.type == endorsement_type:
            raise Conflict(
                f"You've already given this post a {_ENDORSEMENT_LABELS[endorsement_type]}"
            )
        return storage.update_endorsement_type(existing, endorsement_type), False

    endorsement = storage.create_endorsement(
        user_id=user_id,
        post_id=post.id,
        hashtag=post.hashtag,
        endorsement_type=endorsement_type,
    )
    return endorsement, True
