"""
app/api/posts.py

Purpose: Post endpoints (all require a bearer token)

- POST  /posts              create, optional picture
- GET   /posts              global feed
- GET   /posts/{user_id}    one author's posts
- PATCH /posts/{id}/like    toggle the caller's like
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from app.api.deps import Identity, get_object_store, get_post_service, get_settings, require_identity
from app.core.config import Settings
from app.core.exceptions import ValidationError
from app.schemas.posts import CreatePostRequest, PostResponse
from app.services.post_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PostService
from app.services.storage_service import ObjectStore, read_upload

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    description: str = Form(""),
    picture: Optional[UploadFile] = File(None),
    identity: Identity = Depends(require_identity),
    posts: PostService = Depends(get_post_service),
    store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
):
    """
    Creates a post for the authenticated user.
    Without a picture the upload step is skipped.
    """
    try:
        body = CreatePostRequest(description=description)
    except PydanticValidationError as e:
        raise ValidationError(
            "Input validation failed",
            details=e.errors(include_url=False, include_context=False, include_input=False),
        )

    upload = await read_upload(picture, settings.MAX_UPLOAD_BYTES)
    picture_path = None
    if upload is not None:
        picture_path = await store.upload(upload.data, upload.filename, upload.content_type)

    return await posts.create_post(identity.user_id, body.description, picture_path)


@router.get("", response_model=List[PostResponse])
async def get_feed_posts(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    skip: int = Query(0, ge=0),
    identity: Identity = Depends(require_identity),
    posts: PostService = Depends(get_post_service),
):
    return await posts.get_feed_posts(limit=limit, skip=skip)


@router.get("/{user_id}", response_model=List[PostResponse])
async def get_user_posts(
    user_id: str,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    skip: int = Query(0, ge=0),
    identity: Identity = Depends(require_identity),
    posts: PostService = Depends(get_post_service),
):
    return await posts.get_user_posts(user_id, limit=limit, skip=skip)


@router.patch("/{post_id}/like", response_model=PostResponse)
async def like_post(
    post_id: str,
    identity: Identity = Depends(require_identity),
    posts: PostService = Depends(get_post_service),
):
    return await posts.like_post(post_id, identity.user_id)
