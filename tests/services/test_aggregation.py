"""Tests for reaction histograms, hashtag reputation and trending rankings."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from energy_pros.services.aggregation import (
    AggregationService,
    HashtagCount,
    rank_hashtags,
    reaction_histogram,
)
from energy_pros.services.engagement import from_reaction
from energy_pros.services.errors import AggregationError


def _user(storage, name):
    return storage.create_user(
        username=name, email=f"{name}@example.com", password="hashed", full_name=name.title()
    )


def _post(storage, author, hashtag):
    return storage.create_post(
        content="Energy storage update",
        hashtag=hashtag,
        user_id=author.id,
        is_anonymous=False,
        post_type="general",
        structured_data=None,
    )


def test_rank_hashtags_orders_by_count_then_name() -> None:
    ranked = rank_hashtags({"#news": 2, "#job": 3, "#event": 2, "#solar": 1}, limit=3)
    assert ranked == [
        HashtagCount("#job", 3),
        HashtagCount("#event", 2),
        HashtagCount("#news", 2),
    ]


def test_rank_hashtags_without_limit_and_with_zero() -> None:
    counts = {"#a": 1, "#b": 2}
    assert [h.hashtag for h in rank_hashtags(counts)] == ["#b", "#a"]
    assert rank_hashtags(counts, limit=0) == []


def test_reaction_histogram_uses_canonical_order() -> None:
    engagements = [
        from_reaction(post_id=1, user_id=1, reaction="angry"),
        from_reaction(post_id=1, user_id=2, reaction="like"),
        from_reaction(post_id=1, user_id=3, reaction="angry"),
    ]
    histogram = reaction_histogram(engagements)
    assert list(histogram) == ["like", "angry"]
    assert histogram == {"like": 1, "angry": 2}


def test_changed_reaction_moves_between_buckets(storage) -> None:
    """Two loves, then one becomes angry: the total stays the same."""
    author = _user(storage, "alice")
    bob = _user(storage, "bob")
    carol = _user(storage, "carol")
    post = _post(storage, author, "#gridcode")
    storage.upsert_reaction(bob.id, post.id, "love")
    storage.upsert_reaction(carol.id, post.id, "love")
    storage.commit()

    service = AggregationService(storage)
    summary = service.post_reactions(post.id)
    assert summary.reactions == {"love": 2}
    assert summary.reaction_count == 2

    storage.upsert_reaction(bob.id, post.id, "angry")
    storage.commit()

    summary = service.post_reactions(post.id, viewer_id=bob.id)
    assert summary.reactions == {"love": 1, "angry": 1}
    assert summary.reaction_count == 2
    assert summary.angry_count == 1
    assert summary.like_count == 0
    assert summary.current_user_reaction == "angry"


def test_endorsement_and_reaction_from_same_member_count_once(storage) -> None:
    author = _user(storage, "alice")
    bob = _user(storage, "bob")
    post = _post(storage, author, "#gridcode")
    storage.create_endorsement(
        user_id=bob.id, post_id=post.id, hashtag=post.hashtag, endorsement_type="positive"
    )
    storage.commit()

    service = AggregationService(storage)
    assert service.post_reactions(post.id).reactions == {"like": 1}
    assert service.current_user_reaction(bob.id, post.id) == "like"

    storage.upsert_reaction(bob.id, post.id, "haha")
    storage.commit()

    summary = service.post_reactions(post.id)
    assert summary.reactions == {"haha": 1}
    assert summary.reaction_count == 1
    assert service.current_user_reaction(bob.id, post.id) == "haha"


def test_summaries_cover_posts_without_engagement(storage) -> None:
    author = _user(storage, "alice")
    quiet = _post(storage, author, "#news")
    storage.commit()

    summaries = AggregationService(storage).summaries_for_posts([quiet.id], viewer_id=author.id)
    assert summaries[quiet.id].reactions == {}
    assert summaries[quiet.id].reaction_count == 0
    assert summaries[quiet.id].current_user_reaction is None


def test_trending_by_posts_breaks_ties_and_limits(storage) -> None:
    author = _user(storage, "alice")
    for tag in ("#job", "#job", "#job", "#news", "#news", "#event", "#event", "#solar"):
        _post(storage, author, tag)
    storage.commit()

    trending = AggregationService(storage).trending_by_posts(limit=2)
    assert trending == [HashtagCount("#job", 3), HashtagCount("#event", 2)]


def test_trending_by_engagement_differs_from_post_counts(storage) -> None:
    author = _user(storage, "alice")
    fans = [_user(storage, f"fan{i}") for i in range(3)]
    popular = _post(storage, author, "#news")
    for tag in ("#job", "#job"):
        _post(storage, author, tag)
    for fan in fans:
        storage.upsert_reaction(fan.id, popular.id, "like")
    storage.commit()

    service = AggregationService(storage)
    assert service.trending_by_posts(1) == [HashtagCount("#job", 2)]
    assert service.trending_by_engagement(1) == [HashtagCount("#news", 3)]

    analytics = service.hashtag_analytics(limit=5)
    assert analytics.total_posts == 3
    assert analytics.total_engagements == 3
    assert analytics.by_posts[0].hashtag == "#job"
    assert analytics.by_engagements == [HashtagCount("#news", 3)]


def test_hashtag_reputation_groups_engagement_on_members_posts(storage) -> None:
    author = _user(storage, "alice")
    bob = _user(storage, "bob")
    carol = _user(storage, "carol")
    grid = _post(storage, author, "#gridcode")
    job = _post(storage, author, "#job")
    unrelated = _post(storage, bob, "#gridcode")
    storage.upsert_reaction(bob.id, grid.id, "like")
    storage.upsert_reaction(carol.id, grid.id, "love")
    storage.create_endorsement(
        user_id=carol.id, post_id=job.id, hashtag=job.hashtag, endorsement_type="negative"
    )
    storage.upsert_reaction(carol.id, unrelated.id, "like")
    storage.commit()

    reputation = AggregationService(storage).hashtag_reputation(author.id)
    assert reputation == [HashtagCount("#gridcode", 2), HashtagCount("#job", 1)]
    assert AggregationService(storage).hashtag_reputation(carol.id) == []


def test_storage_failure_becomes_aggregation_error() -> None:
    failing = MagicMock()
    failing.list_engagements.side_effect = OperationalError("SELECT", {}, Exception("down"))
    failing.hashtag_post_counts.side_effect = OperationalError("SELECT", {}, Exception("down"))

    service = AggregationService(failing)
    with pytest.raises(AggregationError) as excinfo:
        service.trending_by_engagement(5)
    assert excinfo.value.message == "Error computing aggregation"
    assert excinfo.value.status_code == 500

    with pytest.raises(AggregationError):
        service.trending_by_posts(5)
