"""
app/core/security.py

Purpose: Credential primitives

- Salted, adaptive password hashing (passlib pbkdf2_sha256)
- Signed, time-bound access tokens (PyJWT HS256)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

import jwt
from passlib.context import CryptContext

_JWT_ALG = "HS256"


@lru_cache(maxsize=8)
def _context(rounds: int) -> CryptContext:
    # Hashes below the configured work factor are reported as needing an update
    return CryptContext(
        schemes=["pbkdf2_sha256"],
        deprecated="auto",
        pbkdf2_sha256__default_rounds=rounds,
        pbkdf2_sha256__min_rounds=rounds,
    )


def hash_password(password: str, rounds: int) -> str:
    if not password:
        raise ValueError("password_blank")
    return _context(rounds).hash(password)


def verify_password(password: str, password_hash: str, rounds: int) -> Tuple[bool, Optional[str]]:
    """
    Checks ``password`` against ``password_hash``.

    Returns:
        (valid, new_hash) where new_hash is set when the stored hash was made
        with fewer rounds than ``rounds`` and should be replaced
    """
    if not password or not password_hash:
        return False, None
    try:
        return _context(rounds).verify_and_update(password, password_hash)
    except ValueError:
        # Unrecognized or corrupt hash
        return False, None


def create_access_token(
    *,
    secret: str,
    user_id: str,
    expires_minutes: int,
    now: datetime | None = None,
) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = now or datetime.now(timezone.utc)
    exp = now + timedelta(minutes=max(1, int(expires_minutes)))

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    """Verify signature and expiry; raises ``jwt.InvalidTokenError`` subclasses."""
    if not token:
        raise ValueError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(
        token,
        secret,
        algorithms=[_JWT_ALG],
        options={"require": ["sub", "exp", "iat"]},
    )
