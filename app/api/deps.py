"""
app/api/deps.py

Purpose: Request dependencies

- Hands out the clients built in the application lifespan
- Bearer-token access control; decoded identity lands on request.state
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings
from app.core.exceptions import UnauthorizedError
from app.core.logging import bind_log_context, get_logger
from app.core.security import decode_access_token
from app.db.mongo import MongoDatabase
from app.services.post_service import PostService
from app.services.storage_service import ObjectStore
from utils.time_utils import from_timestamp

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """Who the bearer token says the caller is."""

    user_id: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> MongoDatabase:
    db = getattr(request.app.state, "database", None)
    if db is None:
        raise RuntimeError("Database not initialized")
    return db


def get_object_store(request: Request) -> ObjectStore:
    store = getattr(request.app.state, "object_store", None)
    if store is None:
        raise RuntimeError("Object store not initialized")
    return store


def get_post_service(db: MongoDatabase = Depends(get_database)) -> PostService:
    return PostService(db)


async def require_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Authenticates the request from ``Authorization: Bearer <token>``.

    Raises:
        UnauthorizedError: header missing, signature invalid, or token expired
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access denied", details={"reason": "missing_token"})

    try:
        payload = decode_access_token(token=credentials.credentials, secret=settings.JWT_SECRET)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired", details={"reason": "token_expired"})
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token", details={"reason": "token_invalid"})

    sub = payload.get("sub")
    if not sub:
        raise UnauthorizedError("Invalid token", details={"reason": "token_missing_sub"})

    identity = Identity(
        user_id=str(sub),
        issued_at=from_timestamp(payload.get("iat")),
        expires_at=from_timestamp(payload.get("exp")),
    )
    request.state.identity = identity
    bind_log_context(user_id=identity.user_id)
    return identity
