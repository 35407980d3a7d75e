"""Tests for hashtag listing and trending endpoints."""

from fastapi import status


def test_common_hashtags(client) -> None:
    response = client.get("/api/v1/hashtags/common")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == ["job", "event", "gridcode", "question", "news"]


def test_trending_by_post_count(client, make_post, test_user) -> None:
    for tag in ("#job", "#job", "#job", "#news", "#news", "#event"):
        make_post(test_user, tag)

    response = client.get("/api/v1/hashtags/trending", params={"limit": 2})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [
        {"hashtag": "#job", "count": 3},
        {"hashtag": "#news", "count": 2},
    ]


def test_trending_defaults_to_configured_limit(client, make_post, test_user) -> None:
    for index in range(7):
        make_post(test_user, f"#tag{index}")

    assert len(client.get("/api/v1/hashtags/trending").json()) == 5


def test_hashtag_analytics_compares_rankings(
    client, make_post, test_user, make_user, headers_for
) -> None:
    popular = make_post(test_user, "#news")
    make_post(test_user, "#job")
    make_post(test_user, "#job")
    for name in ("fan1", "fan2"):
        client.post(
            "/api/v1/reactions",
            json={"postId": popular.id, "reaction": "like"},
            headers=headers_for(make_user(name)),
        )

    data = client.get("/api/v1/hashtags/analytics", params={"limit": 1}).json()
    assert data["limit"] == 1
    assert data["trendingByPosts"] == [{"hashtag": "#job", "count": 2}]
    assert data["trendingByReactions"] == [{"hashtag": "#news", "count": 2}]
    assert data["totalPosts"] == 3
    assert data["totalReactions"] == 2
