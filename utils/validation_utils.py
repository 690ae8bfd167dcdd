"""
utils/validation_utils.py

Purpose: Input validation

- Email normalization
- ObjectId parsing for path parameters
- Upload filename sanitization
"""

import posixpath
import re
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

from app.core.exceptions import ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def normalize_email(email: Optional[str]) -> str:
    """
    Trims and lower-cases an email address.
    """
    return (email or "").strip().lower()


def validate_email(email: str) -> bool:
    """
    Loose format check; deliverability is not our concern.
    """
    return bool(email) and bool(EMAIL_PATTERN.match(email))


def parse_object_id(value: str, field: str = "id") -> ObjectId:
    """
    Parses a path parameter into an ObjectId.

    Raises:
        ValidationError: if the value is not a 24-hex-digit id
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {field}", details={"field": field, "value": value})


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Reduces a client-supplied filename to a safe single path segment.

    Examples:
        "../../etc/passwd" -> "passwd"
        "my photo (1).png" -> "my_photo__1_.png"
    """
    name = posixpath.basename((filename or "").replace("\\", "/")).strip()
    name = UNSAFE_NAME_CHARS.sub("_", name)
    name = name.lstrip(".")
    if not name:
        raise ValidationError("Uploaded file has no usable name", details={"field": "picture"})
    return name
