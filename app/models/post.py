"""
app/models/post.py

Purpose: Post document model

- Author snapshot copied at creation time
- Likes kept as a user_id -> True mapping
"""

from datetime import datetime
from typing import Any, Dict, Optional

from utils.time_utils import utcnow


def new_post_document(
    *,
    author: Dict[str, Any],
    description: str,
    picture_path: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    now = now or utcnow()
    doc = {
        "user_id": str(author["_id"]),
        "first_name": author.get("first_name", ""),
        "last_name": author.get("last_name", ""),
        "location": author.get("location", ""),
        "user_picture_path": author.get("picture_path"),
        "description": description,
        "likes": {},
        "comments": [],
        "created_at": now,
        "updated_at": now,
    }
    if picture_path:
        doc["picture_path"] = picture_path
    return doc


def public_post(doc: Dict[str, Any]) -> Dict[str, Any]:
    d = dict(doc)
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    d.setdefault("picture_path", None)
    d["likes"] = dict(d.get("likes") or {})
    return d
