from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PostResponse(BaseModel):
    """A post as returned by the feed endpoints."""

    id: str
    user_id: str
    first_name: str = ""
    last_name: str = ""
    location: str = ""
    user_picture_path: Optional[str] = None
    description: str = ""
    picture_path: Optional[str] = None
    likes: Dict[str, bool] = Field(default_factory=dict)
    comments: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreatePostRequest(BaseModel):
    description: str = Field(default="", max_length=5000)
