from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    """Public user profile. Credentials are never part of this model."""

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str
    picture_path: Optional[str] = None
    location: str = ""
    occupation: str = ""
    following: List[str] = Field(default_factory=list)
    followers: List[str] = Field(default_factory=list)
    viewed_profile: int = 0
    impressions: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FriendResponse(BaseModel):
    """Short profile shown in following/followers lists."""

    id: str
    first_name: str = ""
    last_name: str = ""
    occupation: str = ""
    location: str = ""
    picture_path: Optional[str] = None
