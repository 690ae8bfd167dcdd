"""
app/api/users.py

Purpose: Profile and follow-graph endpoints (all require a bearer token)
"""

from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import Identity, get_database, require_identity
from app.core.exceptions import ForbiddenError
from app.db.mongo import MongoDatabase
from app.schemas.users import FriendResponse, UserResponse
from app.services import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    identity: Identity = Depends(require_identity),
    db: MongoDatabase = Depends(get_database),
):
    return await user_service.get_user(db, user_id)


@router.get("/{user_id}/following", response_model=List[FriendResponse])
async def get_following(
    user_id: str,
    identity: Identity = Depends(require_identity),
    db: MongoDatabase = Depends(get_database),
):
    return await user_service.get_following(db, user_id)


@router.get("/{user_id}/followers", response_model=List[FriendResponse])
async def get_followers(
    user_id: str,
    identity: Identity = Depends(require_identity),
    db: MongoDatabase = Depends(get_database),
):
    return await user_service.get_followers(db, user_id)


@router.patch("/{user_id}/{friend_id}", response_model=List[FriendResponse])
async def toggle_follow(
    user_id: str,
    friend_id: str,
    identity: Identity = Depends(require_identity),
    db: MongoDatabase = Depends(get_database),
):
    """
    Follows or unfollows ``friend_id`` on behalf of ``user_id``.
    Callers may only change their own follow list.
    """
    if identity.user_id != user_id:
        raise ForbiddenError("Cannot change another user's follow list")
    return await user_service.toggle_follow(db, user_id, friend_id)
