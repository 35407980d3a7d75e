"""Behaviour shared by the in-memory and SQL storage backends."""

import pytest

from energy_pros.services.engagement import EngagementSource


def _user(storage, name):
    return storage.create_user(
        username=name, email=f"{name}@example.com", password="hashed", full_name=name.title()
    )


def _post(storage, author, hashtag="#gridcode", **kwargs):
    return storage.create_post(
        content=kwargs.get("content", "Substation maintenance notes"),
        hashtag=hashtag,
        user_id=author.id,
        is_anonymous=kwargs.get("is_anonymous", False),
        post_type=kwargs.get("post_type", "general"),
        structured_data=None,
    )


def test_user_lookups(storage) -> None:
    user = _user(storage, "alice")
    storage.commit()

    assert storage.get_user(user.id).username == "alice"
    assert storage.get_user_by_username("alice").id == user.id
    assert storage.get_user_by_email("alice@example.com").id == user.id
    assert storage.get_user_by_username("nobody") is None
    assert set(storage.get_users([user.id, 999])) == {user.id}


def test_list_posts_newest_first_with_filters(storage) -> None:
    author = _user(storage, "alice")
    first = _post(storage, author, "#job", post_type="job")
    second = _post(storage, author, "#news")
    third = _post(storage, author, "#job")
    storage.commit()

    assert [p.id for p in storage.list_posts()] == [third.id, second.id, first.id]
    assert [p.id for p in storage.list_posts(hashtag="#job")] == [third.id, first.id]
    assert [p.id for p in storage.list_posts(post_type="job")] == [first.id]
    assert [p.id for p in storage.list_posts(limit=1)] == [third.id]


def test_transaction_rolls_back_every_write(storage) -> None:
    """A failing block leaves no trace in either backend."""
    author = _user(storage, "alice")
    storage.commit()

    with pytest.raises(RuntimeError):
        with storage.transaction():
            _post(storage, author)
            _user(storage, "bob")
            raise RuntimeError("boom")

    assert storage.list_posts() == []
    assert storage.get_user_by_username("bob") is None
    assert storage.get_user_by_username("alice") is not None


def test_upsert_reaction_keeps_one_row_per_member(storage) -> None:
    author = _user(storage, "alice")
    reactor = _user(storage, "bob")
    post = _post(storage, author)
    storage.commit()

    reaction, created = storage.upsert_reaction(reactor.id, post.id, "love")
    assert created is True
    again, created = storage.upsert_reaction(reactor.id, post.id, "angry")
    storage.commit()

    assert created is False
    assert again.id == reaction.id
    assert storage.get_reaction(reactor.id, post.id).reaction == "angry"
    assert len(storage.list_engagements([post.id])) == 1


def test_sql_upsert_reaction_recovers_from_insert_race(sql_storage, monkeypatch) -> None:
    """A row inserted between the lookup and the insert is updated instead."""
    author = _user(sql_storage, "alice")
    reactor = _user(sql_storage, "bob")
    post = _post(sql_storage, author)
    sql_storage.upsert_reaction(reactor.id, post.id, "love")
    sql_storage.commit()

    real_get_reaction = sql_storage.get_reaction
    lookups = []

    def stale_first_lookup(user_id, post_id):
        lookups.append((user_id, post_id))
        if len(lookups) == 1:
            return None
        return real_get_reaction(user_id, post_id)

    monkeypatch.setattr(sql_storage, "get_reaction", stale_first_lookup)

    reaction, created = sql_storage.upsert_reaction(reactor.id, post.id, "angry")
    sql_storage.commit()

    assert created is False
    assert reaction.reaction == "angry"
    assert len(lookups) == 2
    assert real_get_reaction(reactor.id, post.id).reaction == "angry"
    assert len(sql_storage.list_engagements([post.id])) == 1


def test_list_engagements_reads_both_tables_with_post_hashtag(storage) -> None:
    author = _user(storage, "alice")
    bob = _user(storage, "bob")
    carol = _user(storage, "carol")
    post = _post(storage, author, "#event")
    storage.upsert_reaction(bob.id, post.id, "wow")
    storage.create_endorsement(
        user_id=carol.id, post_id=post.id, hashtag="#event", endorsement_type="negative"
    )
    storage.commit()

    engagements = storage.list_engagements()
    by_source = {e.source: e for e in engagements}
    assert by_source[EngagementSource.REACTION].kind == "wow"
    assert by_source[EngagementSource.ENDORSEMENT].kind == "angry"
    assert {e.hashtag for e in engagements} == {"#event"}
    assert storage.list_engagements([]) == []


def test_delete_post_removes_children(storage) -> None:
    author = _user(storage, "alice")
    bob = _user(storage, "bob")
    post = _post(storage, author)
    post_id = post.id
    storage.upsert_reaction(bob.id, post_id, "like")
    storage.create_endorsement(
        user_id=bob.id, post_id=post_id, hashtag=post.hashtag, endorsement_type="positive"
    )
    storage.create_comment(post_id=post_id, user_id=bob.id, content="Nice one")
    storage.commit()

    storage.delete_post(post)
    storage.commit()

    assert storage.get_post(post_id) is None
    assert storage.list_engagements() == []
    assert storage.list_comments(post_id) == []
    assert storage.count_comments([post_id]) == {}


def test_comments_are_listed_oldest_first_and_counted(storage) -> None:
    author = _user(storage, "alice")
    post = _post(storage, author)
    first = storage.create_comment(post_id=post.id, user_id=author.id, content="first")
    second = storage.create_comment(post_id=post.id, user_id=author.id, content="second")
    storage.commit()

    assert [c.id for c in storage.list_comments(post.id)] == [first.id, second.id]
    assert storage.count_comments([post.id]) == {post.id: 2}


def test_hashtag_post_counts(storage) -> None:
    author = _user(storage, "alice")
    for tag in ("#job", "#job", "#news"):
        _post(storage, author, tag)
    storage.commit()

    assert storage.hashtag_post_counts() == {"#job": 2, "#news": 1}
