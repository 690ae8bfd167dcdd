"""
Database initialization script

Creates collections and indexes, and optionally loads demo users and posts:
    python scripts/init_db.py
    python scripts/init_db.py --seed
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from app.core.config import Settings
from app.core.security import hash_password
from app.db.indexes import create_indexes
from app.db.mongo import MongoDatabase
from app.models.post import new_post_document
from app.models.user import new_user_document

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {
        "first_name": "Steve",
        "last_name": "Ralph",
        "email": "steve.ralph@example.com",
        "location": "New York, CA",
        "occupation": "Degenerate",
        "picture_path": "/assets/img/p3.jpeg",
    },
    {
        "first_name": "Whatcha",
        "last_name": "Doing",
        "email": "whatcha.doing@example.com",
        "location": "Korea, CA",
        "occupation": "Educator",
        "picture_path": "/assets/img/p6.jpeg",
    },
    {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane.doe@example.com",
        "location": "Utah, CA",
        "occupation": "Hacker",
        "picture_path": "/assets/img/p5.jpeg",
    },
]

DEMO_POSTS = [
    ("steve.ralph@example.com", "Some really long random description", "/assets/img/post1.jpeg"),
    ("whatcha.doing@example.com", "Another really long random description. This one is longer than the previous one.", "/assets/img/post2.jpeg"),
    ("jane.doe@example.com", "This is the last really long random description.", None),
]


async def seed(db: MongoDatabase, settings: Settings):
    """Insert demo users and posts unless they already exist"""
    password_hash = hash_password(DEMO_PASSWORD, settings.PASSWORD_HASH_ROUNDS)
    authors = {}

    for profile in DEMO_USERS:
        existing = await db.users.find_one({"email": profile["email"]})
        if existing:
            logger.info(f"ℹ️  {profile['email']} already exists")
            authors[profile["email"]] = existing
            continue

        user = new_user_document(password_hash=password_hash, **profile)
        result = await db.users.insert_one(user)
        user["_id"] = result.inserted_id
        authors[profile["email"]] = user
        logger.info(f"✅ Created {profile['email']}")

    if await db.posts.count_documents({}) > 0:
        logger.info("ℹ️  Posts collection not empty, skipping demo posts")
        return

    for email, description, picture_path in DEMO_POSTS:
        await db.posts.insert_one(
            new_post_document(author=authors[email], description=description, picture_path=picture_path)
        )
    logger.info(f"✅ Created {len(DEMO_POSTS)} demo posts")


async def main(with_seed: bool):
    """Main initialization"""
    settings = Settings()

    logger.info("=" * 60)
    logger.info("  Sociopedia Database Setup")
    logger.info("=" * 60 + "\n")

    db = MongoDatabase(settings)
    await db.connect()

    try:
        await create_indexes(db)

        if with_seed:
            await seed(db, settings)

        stats = {
            "users": await db.users.count_documents({}),
            "posts": await db.posts.count_documents({}),
        }
        logger.info(f"\n📊 Current documents: Users={stats['users']}, Posts={stats['posts']}")
        logger.info("\n✅ Database initialization complete!")

    finally:
        await db.close()

    logger.info("\n" + "=" * 60)


if __name__ == "__main__":
    asyncio.run(main(with_seed="--seed" in sys.argv[1:]))
