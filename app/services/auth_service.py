"""
app/services/auth_service.py

Purpose: Registration and login

- Email uniqueness, password hashing, profile persistence
- Credential check and token issuance
- Plaintext passwords and hashes are never logged or returned
"""

from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool
from pymongo.errors import DuplicateKeyError

from app.core.config import Settings
from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from app.core.logging import get_logger
from app.core.security import create_access_token, hash_password, verify_password
from app.db.mongo import MongoDatabase
from app.models.user import new_user_document, public_user
from app.schemas.auth import RegisterRequest
from app.services.storage_service import ObjectStore, UploadedPicture

logger = get_logger(__name__)


async def register(
    db: MongoDatabase,
    store: ObjectStore,
    settings: Settings,
    candidate: RegisterRequest,
    picture: Optional[UploadedPicture],
) -> Dict[str, Any]:
    """
    Creates a user account.

    The picture is uploaded before the user document is written, so a failed
    upload never leaves a user pointing at a missing image. A failure on the
    insert after a successful upload leaves an orphaned object in the bucket.

    Raises:
        ValidationError: no picture attached
        ConflictError: email already registered
        StorageError: upload failed
    """
    if picture is None:
        raise ValidationError("A profile picture is required", details={"field": "picture"})

    if await db.users.find_one({"email": candidate.email}, {"_id": 1}):
        raise ConflictError("Email is already registered", details={"field": "email"})

    password_hash = await run_in_threadpool(hash_password, candidate.password, settings.PASSWORD_HASH_ROUNDS)

    picture_path = await store.upload(picture.data, picture.filename, picture.content_type)

    user = new_user_document(
        email=candidate.email,
        password_hash=password_hash,
        first_name=candidate.first_name,
        last_name=candidate.last_name,
        location=candidate.location,
        occupation=candidate.occupation,
        picture_path=picture_path,
    )

    try:
        result = await db.users.insert_one(user)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration for the same email
        raise ConflictError("Email is already registered", details={"field": "email"})

    user["_id"] = result.inserted_id
    logger.info("New user registered", extra={"user_id": str(result.inserted_id)})

    return public_user(user)


async def login(db: MongoDatabase, settings: Settings, email: str, password: str) -> Dict[str, Any]:
    """
    Verifies credentials and issues an access token.

    Returns:
        {"token": str, "user": public profile}
    """
    user = await db.users.find_one({"email": email})
    if not user:
        raise NotFoundError("User does not exist")

    context = {"user_id": str(user["_id"])}
    valid, new_hash = await run_in_threadpool(
        verify_password, password, user.get("password_hash", ""), settings.PASSWORD_HASH_ROUNDS
    )
    if not valid:
        logger.warning("Login rejected: invalid credentials", extra=context)
        raise UnauthorizedError("Invalid credentials")

    if new_hash:
        # Work factor was raised since this hash was stored
        await db.users.update_one({"_id": user["_id"]}, {"$set": {"password_hash": new_hash}})
        logger.info("Password hash upgraded", extra=context)

    token = create_access_token(
        secret=settings.JWT_SECRET,
        user_id=str(user["_id"]),
        expires_minutes=settings.JWT_EXPIRES_MINUTES,
    )

    logger.info("User logged in", extra=context)

    return {"token": token, "user": public_user(user)}
