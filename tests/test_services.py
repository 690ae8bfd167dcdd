import asyncio

import pytest
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import PyMongoError

from app.core.exceptions import DependencyError, NotFoundError
from app.db.mongo import MongoDatabase
from app.models.user import new_user_document
from app.services import user_service
from app.services.post_service import PostService


@pytest.fixture
async def database(settings):
    return MongoDatabase(settings, database=AsyncMongoMockClient()["sociopedia_services"])


async def add_user(db, email, first_name="User"):
    doc = new_user_document(email=email, password_hash="x", first_name=first_name)
    result = await db.users.insert_one(doc)
    return str(result.inserted_id)


async def test_concurrent_likes_from_distinct_users_persist(database):
    author = await add_user(database, "author@x.com")
    posts = PostService(database)
    post = await posts.create_post(author, "popular")

    likers = [await add_user(database, f"fan{i}@x.com") for i in range(5)]
    await asyncio.gather(*(posts.like_post(post["id"], uid) for uid in likers))

    stored = await database.posts.find_one({})
    assert stored["likes"] == {uid: True for uid in likers}


async def test_like_toggles_in_pairs(database):
    author = await add_user(database, "author@x.com")
    posts = PostService(database)
    post = await posts.create_post(author, "hi")

    for _ in range(2):
        await posts.like_post(post["id"], author)
    assert (await posts.like_post(post["id"], author))["likes"] == {author: True}


async def test_create_post_for_unknown_author(database):
    with pytest.raises(NotFoundError):
        await PostService(database).create_post("0123456789abcdef01234567", "ghost")


async def test_feed_pagination_is_clamped(database):
    author = await add_user(database, "author@x.com")
    posts = PostService(database)
    for i in range(3):
        await posts.create_post(author, f"post {i}")

    assert len(await posts.get_feed_posts(limit=10_000)) == 3
    assert len(await posts.get_user_posts(author, limit=1)) == 1


class FailingTargetUsers:
    """Users collection whose update on one document always fails."""

    def __init__(self, collection, failing_id):
        self._collection = collection
        self._failing_id = failing_id

    def __getattr__(self, name):
        return getattr(self._collection, name)

    async def update_one(self, filter, update, *args, **kwargs):
        if str(filter.get("_id")) == self._failing_id:
            raise PyMongoError("simulated write failure")
        return await self._collection.update_one(filter, update, *args, **kwargs)


async def test_follow_failure_reverts_follower_side(settings, database, monkeypatch):
    follower = await add_user(database, "follower@x.com")
    target = await add_user(database, "target@x.com")

    users = FailingTargetUsers(database.users, target)
    monkeypatch.setattr(MongoDatabase, "users", property(lambda self: users))

    with pytest.raises(DependencyError):
        await user_service.toggle_follow(database, follower, target)

    stored = await users.find_one({"email": "follower@x.com"})
    assert stored["following"] == []
