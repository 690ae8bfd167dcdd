"""
app/schemas/auth.py

Pydantic models for registration and login.
"""

from pydantic import BaseModel, Field, field_validator

from app.schemas.users import UserResponse
from utils.validation_utils import normalize_email, validate_email


class RegisterRequest(BaseModel):
    """Profile fields posted alongside the picture on registration."""

    first_name: str = Field(default="", max_length=50, description="Given name")
    last_name: str = Field(default="", max_length=50, description="Family name")
    email: str = Field(..., max_length=254, description="Login email, unique")
    password: str = Field(..., min_length=1, max_length=1024, description="Plaintext password")
    location: str = Field(default="", max_length=100)
    occupation: str = Field(default="", max_length=100)

    @field_validator("first_name", "last_name", "location", "occupation")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        v = normalize_email(v)
        if not validate_email(v):
            raise ValueError("Invalid email address")
        return v


class LoginRequest(BaseModel):
    """Request schema for the login endpoint."""

    email: str = Field(..., description="Registered email")
    password: str = Field(..., min_length=1, description="Plaintext password")

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)


class LoginResponse(BaseModel):
    """Response schema for the login endpoint."""

    token: str = Field(..., description="Bearer token for the Authorization header")
    user: UserResponse
