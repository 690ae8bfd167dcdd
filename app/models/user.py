"""
app/models/user.py

Purpose: User document model

- Builds new user documents for insertion
- Strips credentials before anything leaves the service layer
"""

from datetime import datetime
from typing import Any, Dict, Optional

from utils.time_utils import utcnow

# Never returned to clients
PRIVATE_FIELDS = ("password_hash",)


def new_user_document(
    *,
    email: str,
    password_hash: str,
    first_name: str = "",
    last_name: str = "",
    location: str = "",
    occupation: str = "",
    picture_path: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or utcnow()
    return {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "password_hash": password_hash,
        "picture_path": picture_path,
        "location": location,
        "occupation": occupation,
        "following": [],
        "followers": [],
        "viewed_profile": 0,
        "impressions": 0,
        "created_at": now,
        "updated_at": now,
    }


def public_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a user document with ``_id`` renamed to ``id`` and secrets removed."""
    d = dict(doc)
    for field in PRIVATE_FIELDS:
        d.pop(field, None)
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    return d


def friend_summary(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Short profile used in following/followers listings."""
    return {
        "id": str(doc["_id"]),
        "first_name": doc.get("first_name", ""),
        "last_name": doc.get("last_name", ""),
        "occupation": doc.get("occupation", ""),
        "location": doc.get("location", ""),
        "picture_path": doc.get("picture_path"),
    }
