"""Tests for comment-like endpoints."""

from uuid import uuid4

from fastapi import status


def _comment(client, author) -> dict:
    photo = client.post(
        "/api/v1/photos/",
        json={"image_url": "https://cdn.example.com/p.jpg"},
        headers=author["headers"],
    ).json()
    return client.post(
        f"/api/v1/photos/{photo['id']}/comments",
        json={"content": "great shot"},
        headers=author["headers"],
    ).json()


def test_like_and_unlike_comment(client, register) -> None:
    author, fan = register(client), register(client, "comment_fan")
    comment = _comment(client, author)

    liked = client.post(f"/api/v1/comments/{comment['id']}/like", headers=fan["headers"])
    assert liked.status_code == status.HTTP_200_OK
    assert liked.json()["count"] == 1

    likers = client.get(f"/api/v1/comments/{comment['id']}/likes").json()
    assert [user["username"] for user in likers] == ["comment_fan"]

    unliked = client.post(f"/api/v1/comments/{comment['id']}/unlike", headers=fan["headers"]).json()
    assert unliked["count"] == 0
    assert unliked["state"] == "inactive"

    again = client.post(f"/api/v1/comments/{comment['id']}/unlike", headers=fan["headers"]).json()
    assert again["changed"] is False


def test_like_comment_toggles(client, register) -> None:
    author, fan = register(client), register(client)
    comment = _comment(client, author)

    client.post(f"/api/v1/comments/{comment['id']}/like", headers=fan["headers"])
    second = client.post(f"/api/v1/comments/{comment['id']}/like", headers=fan["headers"]).json()

    assert second["active"] is False
    assert second["count"] == 0


def test_like_missing_comment(client, register) -> None:
    fan = register(client)

    response = client.post(f"/api/v1/comments/{uuid4()}/like", headers=fan["headers"])
    assert response.status_code == status.HTTP_404_NOT_FOUND
