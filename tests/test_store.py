"""Behaviour shared by every ``SocialStore`` backend.

All tests here run against both the in-memory and the SQL store.
"""

from concurrent.futures import ThreadPoolExecutor
from uuid import uuid4

import pytest

from snapshare.errors import ConflictError, NotFoundError, ValidationError
from snapshare.services.relationships import RelationshipKind, RelationshipState


def test_like_creates_then_flips_one_row(store, make_user, make_photo) -> None:
    owner, fan = make_user(), make_user()
    photo = make_photo(owner)

    first = store.like_photo(fan.id, photo.id)
    assert first.state is RelationshipState.ACTIVE
    assert first.count == 1
    assert first.transition.creates_row

    second = store.like_photo(fan.id, photo.id)
    assert second.state is RelationshipState.INACTIVE
    assert second.count == 0
    # The row is kept, only soft-deleted.
    assert store.relationship_state(RelationshipKind.LIKE, fan.id, photo.id) is RelationshipState.INACTIVE

    third = store.like_photo(fan.id, photo.id)
    assert third.state is RelationshipState.ACTIVE
    assert third.count == 1
    assert not third.transition.creates_row
    assert store.get_photo(photo.id).like_count == 1


def test_two_users_liking_counts_both(store, make_user, make_photo) -> None:
    owner = make_user("owner")
    alice, bob = make_user("alice"), make_user("bob")
    photo = make_photo(owner)

    assert store.like_photo(bob.id, photo.id).count == 1
    assert store.like_photo(alice.id, photo.id).count == 2

    assert store.get_photo(photo.id).like_count == 2
    assert [user.username for user in store.get_liked_users(photo.id)] == ["alice", "bob"]


def test_follow_twice_returns_to_zero(store, make_user) -> None:
    follower, star = make_user(), make_user()

    assert store.follow_user(follower.id, star.id).count == 1
    assert store.is_following(follower.id, star.id)

    outcome = store.follow_user(follower.id, star.id)
    assert outcome.count == 0
    assert outcome.state is RelationshipState.INACTIVE
    assert not store.is_following(follower.id, star.id)
    assert store.get_user(star.id).follower_count == 0
    assert store.get_followers(star.id) == []


def test_like_missing_photo_mutates_nothing(store, make_user) -> None:
    fan = make_user()
    missing = uuid4()

    with pytest.raises(NotFoundError):
        store.like_photo(fan.id, missing)

    assert store.relationship_state(RelationshipKind.LIKE, fan.id, missing) is RelationshipState.ABSENT
    assert store.get_photo(missing) is None


def test_like_deleted_photo_is_not_found(store, make_user, make_photo) -> None:
    owner, fan = make_user(), make_user()
    photo = make_photo(owner)
    store.like_photo(fan.id, photo.id)
    store.delete_photo(owner.id, photo.id)

    with pytest.raises(NotFoundError):
        store.like_photo(fan.id, photo.id)
    assert store.relationship_state(RelationshipKind.LIKE, fan.id, photo.id) is RelationshipState.ACTIVE


def test_unknown_actor_is_not_found(store, make_user, make_photo) -> None:
    photo = make_photo(make_user())

    with pytest.raises(NotFoundError):
        store.like_photo(uuid4(), photo.id)
    assert store.get_photo(photo.id).like_count == 0


@pytest.mark.parametrize("bad_id", ["not-a-uuid", "", 42])
def test_malformed_ids_are_rejected(store, make_user, make_photo, bad_id) -> None:
    user = make_user()
    photo = make_photo(user)

    with pytest.raises(ValidationError):
        store.like_photo(bad_id, photo.id)
    with pytest.raises(ValidationError):
        store.follow_user(user.id, bad_id)
    with pytest.raises(ValidationError):
        store.like_comment(user.id, bad_id)


def test_string_ids_are_accepted(store, make_user, make_photo) -> None:
    owner, fan = make_user(), make_user()
    photo = make_photo(owner)

    assert store.like_photo(str(fan.id), str(photo.id)).count == 1


def test_self_follow_is_rejected(store, make_user) -> None:
    user = make_user()

    with pytest.raises(ValidationError):
        store.follow_user(user.id, user.id)
    assert store.get_user(user.id).follower_count == 0


def test_unfollow_only_deactivates(store, make_user) -> None:
    follower, star = make_user(), make_user()

    noop = store.unfollow_user(follower.id, star.id)
    assert not noop.changed
    assert noop.state is RelationshipState.ABSENT
    assert noop.count == 0

    store.follow_user(follower.id, star.id)
    outcome = store.unfollow_user(follower.id, star.id)
    assert outcome.changed
    assert outcome.count == 0

    again = store.unfollow_user(follower.id, star.id)
    assert not again.changed
    assert again.state is RelationshipState.INACTIVE
    assert store.get_user(star.id).follower_count == 0


def test_comment_likes(store, make_user, make_photo) -> None:
    owner, fan = make_user("owner"), make_user("fan")
    photo = make_photo(owner)
    comment = store.create_comment(owner.id, photo.id, "first!")

    assert store.like_comment(fan.id, comment.id).count == 1
    assert [user.username for user in store.get_comment_likers(comment.id)] == ["fan"]

    assert store.unlike_comment(fan.id, comment.id).count == 0
    assert not store.unlike_comment(fan.id, comment.id).changed
    assert store.get_comment(comment.id).like_count == 0

    assert store.like_comment(fan.id, comment.id).count == 1
    assert store.like_comment(fan.id, comment.id).count == 0


def test_comment_like_on_missing_comment(store, make_user) -> None:
    with pytest.raises(NotFoundError):
        store.like_comment(make_user().id, uuid4())


def test_counter_matches_active_relationships(store, make_user, make_photo) -> None:
    owner = make_user()
    fans = [make_user() for _ in range(4)]
    photo = make_photo(owner)

    for index in (0, 1, 2, 1, 3, 0, 0, 2, 3, 3):
        store.like_photo(fans[index].id, photo.id)

    active = [
        fan
        for fan in fans
        if store.relationship_state(RelationshipKind.LIKE, fan.id, photo.id).is_active
    ]
    assert store.get_photo(photo.id).like_count == len(active) == len(store.get_liked_users(photo.id))


def test_concurrent_likes_are_not_lost(store, make_user, make_photo) -> None:
    owner = make_user()
    fans = [make_user() for _ in range(8)]
    photo = make_photo(owner)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda fan: store.like_photo(fan.id, photo.id), fans))

    assert store.get_photo(photo.id).like_count == 8
    assert len(store.get_liked_users(photo.id)) == 8


def test_concurrent_double_toggles_cancel_out(store, make_user) -> None:
    star = make_user()
    followers = [make_user() for _ in range(4)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda user: store.follow_user(user.id, star.id), followers * 2))

    assert store.get_user(star.id).follower_count == 0
    assert store.get_followers(star.id) == []
    for user in followers:
        assert store.relationship_state(RelationshipKind.FOLLOW, user.id, star.id) is RelationshipState.INACTIVE


def test_adjust_counter_clamps_at_zero(store, make_user, make_photo) -> None:
    photo = make_photo(make_user())

    assert store.adjust_counter("photo", photo.id, "like_count", 2) == 2
    assert store.adjust_counter("photo", photo.id, "like_count", -5) == 0
    assert store.get_photo(photo.id).like_count == 0


def test_adjust_counter_rejects_unknown_fields(store, make_user) -> None:
    user = make_user()

    with pytest.raises(ValidationError):
        store.adjust_counter("user", user.id, "like_count", 1)
    with pytest.raises(ValidationError):
        store.adjust_counter("album", user.id, "like_count", 1)
    with pytest.raises(NotFoundError):
        store.adjust_counter("user", uuid4(), "follower_count", 1)


def test_duplicate_username_conflicts(store, make_user) -> None:
    make_user("taken")

    with pytest.raises(ConflictError):
        store.create_user("taken", "hash")


def test_user_lookup(store, make_user) -> None:
    user = make_user("lookup")

    assert store.get_user_by_username("lookup").id == user.id
    assert store.get_user_by_username("nobody") is None
    assert store.get_user(uuid4()) is None


def test_profile_update_keeps_empty_values(store, make_user) -> None:
    user = make_user()
    store.update_user_profile(user.id, bio="hello", display_name="Hello")

    updated = store.update_user_profile(user.id, bio="", avatar_url="https://a.example/x.png")
    assert updated.bio == "hello"
    assert updated.display_name == "Hello"
    assert updated.avatar_url == "https://a.example/x.png"

    with pytest.raises(NotFoundError):
        store.update_user_profile(uuid4(), bio="x")


def test_comments_bump_comment_count(store, make_user, make_photo) -> None:
    owner, guest = make_user(), make_user()
    photo = make_photo(owner)

    first = store.create_comment(guest.id, photo.id, "nice")
    second = store.create_comment(owner.id, photo.id, "thanks")

    assert store.get_photo(photo.id).comment_count == 2
    assert [c.id for c in store.get_photo_comments(photo.id)] == [first.id, second.id]
    with pytest.raises(NotFoundError):
        store.create_comment(guest.id, uuid4(), "lost")


def test_delete_photo_is_owner_only_soft_delete(store, make_user, make_photo) -> None:
    owner, other = make_user(), make_user()
    photo = make_photo(owner)

    with pytest.raises(NotFoundError):
        store.delete_photo(other.id, photo.id)

    deleted = store.delete_photo(owner.id, photo.id)
    assert deleted.is_deleted
    assert store.get_photo(photo.id) is None
    assert store.get_photos() == []
    assert store.get_user_photos(owner.id) == []
    with pytest.raises(NotFoundError):
        store.delete_photo(owner.id, photo.id)


def test_photos_ranked_by_owner_popularity_then_likes(store, make_user, make_photo) -> None:
    popular, quiet = make_user(), make_user()
    fans = [make_user() for _ in range(2)]
    quiet_liked = make_photo(quiet, "liked")
    quiet_plain = make_photo(quiet, "plain")
    popular_photo = make_photo(popular, "popular")

    store.follow_user(fans[0].id, popular.id)
    store.like_photo(fans[0].id, quiet_liked.id)
    store.like_photo(fans[1].id, quiet_liked.id)

    ranked = [photo.id for photo in store.get_photos()]
    assert ranked == [popular_photo.id, quiet_liked.id, quiet_plain.id]


def test_create_photo_for_unknown_user(store) -> None:
    with pytest.raises(NotFoundError):
        store.create_photo(uuid4(), "https://cdn.example.com/p.jpg")


def test_like_unlike_relike_scenario(store, make_user, make_photo) -> None:
    owner, alice, bob = make_user(), make_user("alice"), make_user("bob")
    photo = make_photo(owner)

    store.like_photo(alice.id, photo.id)
    store.like_photo(bob.id, photo.id)
    assert store.like_photo(alice.id, photo.id).count == 1
    assert store.like_photo(alice.id, photo.id).count == 2

    assert store.get_photo(photo.id).like_count == 2
    assert [user.username for user in store.get_liked_users(photo.id)] == ["alice", "bob"]


def test_comment_on_deleted_photo_cannot_be_liked(store, make_user, make_photo) -> None:
    owner, fan = make_user(), make_user()
    photo = make_photo(owner)
    comment = store.create_comment(owner.id, photo.id, "mine")
    store.delete_photo(owner.id, photo.id)

    with pytest.raises(NotFoundError):
        store.like_comment(fan.id, comment.id)
    assert store.get_comment(comment.id).like_count == 0
    assert store.relationship_state(RelationshipKind.COMMENT_LIKE, fan.id, comment.id) is RelationshipState.ABSENT
