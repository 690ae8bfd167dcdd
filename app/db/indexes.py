"""
app/db/indexes.py

Purpose: Database index management

- Unique email index backs the registration conflict check
- Feed indexes keep recency-ordered reads cheap
"""

from pymongo import ASCENDING, DESCENDING

from app.db.mongo import MongoDatabase
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(db: MongoDatabase):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = db.users
        posts = db.posts

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        logger.debug("Created unique index on users.email")

        # ==============================================
        # POSTS COLLECTION INDEXES
        # ==============================================

        # Global feed, most recent first
        await posts.create_index([("created_at", DESCENDING)], name="post_created_idx")
        logger.debug("Created index on posts.created_at")

        # Per-author feed
        await posts.create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)],
            name="user_posts_idx"
        )
        logger.debug("Created compound index on posts.user_id + created_at")

        user_indexes = await users.index_information()
        post_indexes = await posts.index_information()

        logger.info(
            f"✅ Index summary: Users={len(user_indexes)}, Posts={len(post_indexes)}"
        )

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise
