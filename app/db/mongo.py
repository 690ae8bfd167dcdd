"""
app/db/mongo.py

Purpose: MongoDB connection setup

- Wraps the Motor client with connection pooling
- Collections: users, posts
- Health checks and startup retry logic
- Explicit connect/close lifecycle owned by the application lifespan
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio

from app.core.config import Settings
from app.core.logging import get_logger

logger = get_logger(__name__)

USERS = "users"
POSTS = "posts"


class MongoDatabase:
    """
    Owns one Motor client and the database handle used by the services.

    Either call ``connect()`` to open a real connection, or pass an already
    constructed database (tests hand in a mongomock-motor database).
    """

    def __init__(self, settings: Settings, database: Optional[AsyncIOMotorDatabase] = None):
        self.settings = settings
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = database

    async def connect(self, max_retries: int = 3, retry_delay: float = 2):
        """
        Establishes connection to MongoDB with retry logic.
        Called during application startup.
        """
        if self._client is not None:
            logger.warning("MongoDB client already initialized")
            return

        for attempt in range(1, max_retries + 1):
            try:
                logger.info(
                    f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
                )

                client = AsyncIOMotorClient(
                    self.settings.MONGODB_URL,
                    maxPoolSize=50,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=10000,
                    retryWrites=True,
                    retryReads=True,
                    tz_aware=True,
                )

                # Verify connection
                await client.admin.command("ping")

                self._client = client
                self._database = client[self.settings.MONGODB_DB_NAME]
                logger.info(
                    f"✅ Successfully connected to MongoDB: {self.settings.MONGODB_DB_NAME}"
                )
                return

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(
                    f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
                )

                if attempt < max_retries:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                    retry_delay *= 2  # Exponential backoff
                else:
                    logger.critical("Failed to connect to MongoDB after all retries")
                    raise ConnectionError("Could not establish MongoDB connection") from e

    async def close(self):
        """
        Closes the MongoDB connection.
        Called during application shutdown.
        """
        if self._client:
            logger.info("Closing MongoDB connection")
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    async def ping(self) -> bool:
        """
        Checks if the database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if self._database is None:
                logger.error("MongoDB database not initialized")
                return False

            await self._database.command("ping")
            return True

        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._database is None:
            raise RuntimeError(
                "Database not initialized. Call connect() during startup."
            )
        return self._database

    @property
    def users(self) -> AsyncIOMotorCollection:
        """
        Users collection.

        Fields:
        - email: str (unique, lower-case)
        - password_hash: str
        - first_name, last_name, location, occupation: str
        - picture_path: str | None
        - following, followers: list[str]
        - viewed_profile, impressions: int
        - created_at, updated_at: datetime
        """
        return self.database[USERS]

    @property
    def posts(self) -> AsyncIOMotorCollection:
        """
        Posts collection.

        Fields:
        - user_id: str (author reference)
        - first_name, last_name, location, user_picture_path: author snapshot
        - description: str
        - picture_path: str | None
        - likes: dict[str, bool]
        - comments: list[str]
        - created_at, updated_at: datetime
        """
        return self.database[POSTS]
