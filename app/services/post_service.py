"""
app/services/post_service.py

Purpose: Posts and feeds

- Creates posts with an author snapshot
- Recency-ordered, paginated feeds (global and per author)
- Like toggling with single-document atomic updates
"""

from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.db.mongo import MongoDatabase
from app.models.post import new_post_document, public_post
from utils.time_utils import utcnow
from utils.validation_utils import parse_object_id

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Most recent first; _id breaks ties between posts created in the same millisecond
FEED_ORDER = [("created_at", DESCENDING), ("_id", DESCENDING)]


class PostService:
    """Service for post creation, feeds and likes."""

    def __init__(self, db: MongoDatabase):
        self.db = db

    async def create_post(
        self,
        author_id: str,
        description: str,
        picture_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Inserts a post authored by ``author_id``.

        Returns:
            The created post
        """
        oid = parse_object_id(author_id, field="user_id")
        author = await self.db.users.find_one({"_id": oid}, {"password_hash": 0})
        if not author:
            raise NotFoundError("Author not found", details={"id": author_id})

        post = new_post_document(author=author, description=description, picture_path=picture_path)
        result = await self.db.posts.insert_one(post)
        post["_id"] = result.inserted_id

        logger.info(
            f"Post created{' with picture' if picture_path else ''}",
            extra={"user_id": author_id, "post_id": str(result.inserted_id)},
        )

        return public_post(post)

    async def _page(self, query: Dict[str, Any], limit: int, skip: int) -> List[Dict[str, Any]]:
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        skip = max(0, int(skip))
        cursor = self.db.posts.find(query).sort(FEED_ORDER).skip(skip).limit(limit)
        return [public_post(doc) for doc in await cursor.to_list(length=limit)]

    async def get_feed_posts(self, limit: int = DEFAULT_PAGE_SIZE, skip: int = 0) -> List[Dict[str, Any]]:
        return await self._page({}, limit, skip)

    async def get_user_posts(
        self,
        user_id: str,
        limit: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
    ) -> List[Dict[str, Any]]:
        parse_object_id(user_id, field="user_id")
        return await self._page({"user_id": user_id}, limit, skip)

    async def like_post(self, post_id: str, user_id: str) -> Dict[str, Any]:
        """
        Toggles ``user_id`` in the post's likes.

        Each branch is one conditional update, so likes from different users
        never overwrite each other.

        Returns:
            The updated post
        """
        oid = parse_object_id(post_id)
        field = f"likes.{user_id}"
        now = utcnow()
        context = {"user_id": user_id, "post_id": post_id}

        post = await self.db.posts.find_one_and_update(
            {"_id": oid, field: {"$exists": False}},
            {"$set": {field: True, "updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )
        if post is not None:
            logger.debug("Post liked", extra=context)
            return public_post(post)

        post = await self.db.posts.find_one_and_update(
            {"_id": oid, field: {"$exists": True}},
            {"$unset": {field: ""}, "$set": {"updated_at": now}},
            return_document=ReturnDocument.AFTER,
        )
        if post is not None:
            logger.debug("Post unliked", extra=context)
            return public_post(post)

        raise NotFoundError("Post not found", details={"id": post_id})
