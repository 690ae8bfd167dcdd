"""
app/services/user_service.py

Purpose: User profile and follow graph

- Profile retrieval (sanitized)
- Following / followers listings
- Follow toggle across two documents, with compensation on partial failure
"""

from typing import Any, Dict, List

from bson import ObjectId
from pymongo.errors import PyMongoError

from app.core.exceptions import DependencyError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.mongo import MongoDatabase
from app.models.user import friend_summary, public_user
from utils.time_utils import utcnow
from utils.validation_utils import parse_object_id

logger = get_logger(__name__)


async def get_user(db: MongoDatabase, user_id: str) -> Dict[str, Any]:
    """
    Retrieves a user profile by id.

    Raises:
        ValidationError: malformed id
        NotFoundError: no such user
    """
    oid = parse_object_id(user_id)
    user = await db.users.find_one({"_id": oid})
    if not user:
        raise NotFoundError("User not found", details={"id": user_id})
    return public_user(user)


async def _summaries(db: MongoDatabase, ids: List[str]) -> List[Dict[str, Any]]:
    """Short profiles for ``ids``, preserving their order and skipping dangling or malformed ids."""
    oids = [ObjectId(i) for i in ids if ObjectId.is_valid(i)]
    if not oids:
        return []
    cursor = db.users.find({"_id": {"$in": oids}}, {"password_hash": 0})
    found = {str(doc["_id"]): doc async for doc in cursor}
    return [friend_summary(found[i]) for i in ids if i in found]


async def get_following(db: MongoDatabase, user_id: str) -> List[Dict[str, Any]]:
    user = await get_user(db, user_id)
    return await _summaries(db, user.get("following", []))


async def get_followers(db: MongoDatabase, user_id: str) -> List[Dict[str, Any]]:
    user = await get_user(db, user_id)
    return await _summaries(db, user.get("followers", []))


async def toggle_follow(db: MongoDatabase, user_id: str, target_id: str) -> List[Dict[str, Any]]:
    """
    Follows ``target_id`` if ``user_id`` does not follow it yet, unfollows otherwise.

    Two single-document updates, no transaction:
      1. the follower's ``following`` set
      2. the target's ``followers`` set
    If step 2 fails, step 1 is reverted (best effort) and DependencyError raised.

    Returns:
        The follower's updated following list
    """
    uid = parse_object_id(user_id)
    tid = parse_object_id(target_id, field="friend_id")
    if uid == tid:
        raise ValidationError("Users cannot follow themselves")

    user = await db.users.find_one({"_id": uid}, {"following": 1})
    if not user:
        raise NotFoundError("User not found", details={"id": user_id})
    if not await db.users.find_one({"_id": tid}, {"_id": 1}):
        raise NotFoundError("User not found", details={"id": target_id})

    unfollow = target_id in user.get("following", [])
    op, undo = ("$pull", "$addToSet") if unfollow else ("$addToSet", "$pull")

    context = {"user_id": user_id}

    await db.users.update_one(
        {"_id": uid},
        {op: {"following": target_id}, "$set": {"updated_at": utcnow()}},
    )
    try:
        await db.users.update_one(
            {"_id": tid},
            {op: {"followers": user_id}, "$set": {"updated_at": utcnow()}},
        )
    except PyMongoError as e:
        logger.error(f"Follow update failed on target {target_id}; reverting follower side", extra=context)
        try:
            await db.users.update_one({"_id": uid}, {undo: {"following": target_id}})
        except PyMongoError:
            logger.critical(
                f"Could not revert following set; {user_id} -> {target_id} is inconsistent",
                extra=context,
                exc_info=True,
            )
        raise DependencyError("Could not update follow relationship") from e

    logger.info(f"{'Unfollowed' if unfollow else 'Followed'} {target_id}", extra=context)

    return await get_following(db, user_id)
