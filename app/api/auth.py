"""
app/api/auth.py

Purpose: Registration and login endpoints

- POST /auth/register  multipart profile + picture
- POST /auth/login     JSON credentials
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from app.api.deps import get_database, get_object_store, get_settings
from app.core.config import Settings
from app.core.exceptions import ValidationError
from app.db.mongo import MongoDatabase
from app.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from app.schemas.users import UserResponse
from app.services import auth_service
from app.services.storage_service import ObjectStore, read_upload

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    email: str = Form(...),
    password: str = Form(...),
    first_name: str = Form(""),
    last_name: str = Form(""),
    location: str = Form(""),
    occupation: str = Form(""),
    picture: Optional[UploadFile] = File(None),
    db: MongoDatabase = Depends(get_database),
    store: ObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
):
    """
    Registers a new user. The picture is uploaded before the account is stored.
    """
    try:
        candidate = RegisterRequest(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            location=location,
            occupation=occupation,
        )
    except PydanticValidationError as e:
        raise ValidationError(
            "Input validation failed",
            details=e.errors(include_url=False, include_context=False, include_input=False),
        )

    upload = await read_upload(picture, settings.MAX_UPLOAD_BYTES)
    return await auth_service.register(db, store, settings, candidate, upload)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: MongoDatabase = Depends(get_database),
    settings: Settings = Depends(get_settings),
):
    """
    Exchanges email + password for a bearer token.
    """
    return await auth_service.login(db, settings, body.email, body.password)
