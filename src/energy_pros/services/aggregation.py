"""Counts and rankings computed on demand from engagement and post rows.

Nothing here is materialised: every call reads the current rows and groups
them. Rankings order by count descending and break ties by hashtag so that
output is reproducible.
"""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from energy_pros.models.engagement import REACTION_KINDS
from energy_pros.repositories.base import Storage
from energy_pros.services.engagement import Engagement, merge_engagements
from energy_pros.services.errors import AggregationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class HashtagCount:
    hashtag: str
    count: int


@dataclass(frozen=True)
class ReactionSummary:
    """Reaction histogram for one post plus the backward-compatible scalars."""

    reactions: dict[str, int] = field(default_factory=dict)
    current_user_reaction: str | None = None

    @property
    def reaction_count(self) -> int:
        return sum(self.reactions.values())

    @property
    def like_count(self) -> int:
        return self.reactions.get("like", 0)

    @property
    def angry_count(self) -> int:
        return self.reactions.get("angry", 0)


@dataclass(frozen=True)
class HashtagAnalytics:
    by_posts: list[HashtagCount]
    by_engagements: list[HashtagCount]
    total_posts: int
    total_engagements: int


def reaction_histogram(engagements: Iterable[Engagement]) -> dict[str, int]:
    """Group engagements by kind; keys follow the canonical reaction order."""
    counts = Counter(engagement.kind for engagement in engagements)
    ordered = {kind: counts.pop(kind) for kind in REACTION_KINDS if kind in counts}
    ordered.update(sorted(counts.items()))
    return ordered


def rank_hashtags(counts: Mapping[str, int], limit: int | None = None) -> list[HashtagCount]:
    """Return hashtags by count descending, ties broken alphabetically."""
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return [HashtagCount(hashtag=hashtag, count=count) for hashtag, count in ranked]


class AggregationService:
    """Reaction histograms, hashtag reputation and trending rankings."""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def _read(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except SQLAlchemyError as err:
            logger.exception("Storage failure while computing aggregation")
            raise AggregationError() from err

    def _merged(self, post_ids: Collection[int] | None = None) -> list[Engagement]:
        return merge_engagements(self._read(lambda: self.storage.list_engagements(post_ids)))

    def summaries_for_posts(
        self, post_ids: Collection[int], viewer_id: int | None = None
    ) -> dict[int, ReactionSummary]:
        """Build a reaction summary for each post using a single read."""
        by_post: dict[int, list[Engagement]] = {post_id: [] for post_id in post_ids}
        for engagement in self._merged(post_ids):
            by_post.setdefault(engagement.post_id, []).append(engagement)

        summaries: dict[int, ReactionSummary] = {}
        for post_id, engagements in by_post.items():
            mine = next((e.kind for e in engagements if e.user_id == viewer_id), None)
            summaries[post_id] = ReactionSummary(
                reactions=reaction_histogram(engagements),
                current_user_reaction=mine,
            )
        return summaries

    def post_reactions(self, post_id: int, viewer_id: int | None = None) -> ReactionSummary:
        """Histogram of reaction kinds on one post."""
        return self.summaries_for_posts([post_id], viewer_id)[post_id]

    def current_user_reaction(self, user_id: int, post_id: int) -> str | None:
        """Return the member's reaction kind on a post, or None.

        A reaction row wins; a legacy endorsement is reported in reaction terms.
        """
        reaction = self._read(lambda: self.storage.get_reaction(user_id, post_id))
        if reaction is not None:
            return reaction.reaction
        return self.post_reactions(post_id, viewer_id=user_id).current_user_reaction

    def hashtag_reputation(self, user_id: int, limit: int | None = None) -> list[HashtagCount]:
        """Engagement received on a member's posts, grouped by post hashtag."""
        posts = self._read(lambda: self.storage.list_posts(user_id=user_id))
        if not posts:
            return []
        hashtags = {post.id: post.hashtag for post in posts}
        counts = Counter(hashtags[e.post_id] for e in self._merged(hashtags.keys()))
        return rank_hashtags(counts, limit)

    def trending_by_posts(self, limit: int) -> list[HashtagCount]:
        """Top hashtags by number of posts; the authoritative trending signal."""
        return rank_hashtags(self._read(self.storage.hashtag_post_counts), limit)

    def trending_by_engagement(self, limit: int) -> list[HashtagCount]:
        """Top hashtags by engagement received on their posts."""
        counts = Counter(e.hashtag for e in self._merged() if e.hashtag is not None)
        return rank_hashtags(counts, limit)

    def hashtag_analytics(self, limit: int) -> HashtagAnalytics:
        """Both rankings side by side, with the totals they were drawn from."""
        post_counts = self._read(self.storage.hashtag_post_counts)
        engagement_counts = Counter(e.hashtag for e in self._merged() if e.hashtag is not None)
        return HashtagAnalytics(
            by_posts=rank_hashtags(post_counts, limit),
            by_engagements=rank_hashtags(engagement_counts, limit),
            total_posts=sum(post_counts.values()),
            total_engagements=sum(engagement_counts.values()),
        )
