"""Tests for the reaction and endorsement write paths."""

import pytest

from energy_pros.services.errors import Conflict, ValidationFailed
from energy_pros.services.reactions import endorse, set_reaction


@pytest.fixture()
def post_and_member(storage):
    author = storage.create_user(
        username="alice", email="alice@example.com", password="hashed", full_name="Alice"
    )
    member = storage.create_user(
        username="bob", email="bob@example.com", password="hashed", full_name="Bob"
    )
    post = storage.create_post(
        content="Hiring protection engineers",
        hashtag="#job",
        user_id=author.id,
        is_anonymous=False,
        post_type="general",
        structured_data=None,
    )
    storage.commit()
    return post, member


def test_repeated_reaction_is_a_silent_update(storage, post_and_member) -> None:
    post, member = post_and_member

    _, created = set_reaction(storage, user_id=member.id, post=post, kind="like")
    assert created is True
    reaction, created = set_reaction(storage, user_id=member.id, post=post, kind="like")
    assert created is False
    assert reaction.reaction == "like"


def test_unknown_reaction_kind_is_rejected(storage, post_and_member) -> None:
    post, member = post_and_member
    with pytest.raises(ValidationFailed):
        set_reaction(storage, user_id=member.id, post=post, kind="meh")


def test_repeated_endorsement_is_a_conflict(storage, post_and_member) -> None:
    """Unlike reactions, the same endorsement twice is an error."""
    post, member = post_and_member

    endorsement, created = endorse(
        storage, user_id=member.id, post=post, endorsement_type="positive"
    )
    assert created is True
    assert endorsement.hashtag == "#job"

    with pytest.raises(Conflict, match="already given this post a thumbs up"):
        endorse(storage, user_id=member.id, post=post, endorsement_type="positive")


def test_opposite_endorsement_replaces_previous(storage, post_and_member) -> None:
    post, member = post_and_member
    endorse(storage, user_id=member.id, post=post, endorsement_type="positive")

    endorsement, created = endorse(
        storage, user_id=member.id, post=post, endorsement_type="negative"
    )
    storage.commit()

    assert created is False
    assert endorsement.type == "negative"
    assert storage.get_endorsement(member.id, post.id, "#job").type == "negative"
    with pytest.raises(Conflict, match="thumbs down"):
        endorse(storage, user_id=member.id, post=post, endorsement_type="negative")
