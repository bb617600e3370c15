# File: app/core/security.py

"""
Security helpers for the Task Tracker API.

  - Password hashing (bcrypt, salted, configurable cost)
  - Session token issue / verify (signed JWT via python-jose)

Token *revocation* is not handled here. A token that verifies is only
accepted by the API if it is also still stored in the user's token set
(see ``app.api.deps.get_current_user``).
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from jose import JWTError, jwt

from app.core.config import Settings, settings as default_settings

TOKEN_SCOPE = "auth"


# -----------------------------------------------------------------------------
# Password hashing
# -----------------------------------------------------------------------------

def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt. The salt and cost are embedded in the result."""
    salt = bcrypt.gensalt(rounds=rounds or default_settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


# -----------------------------------------------------------------------------
# Session tokens
# -----------------------------------------------------------------------------

def create_access_token(user_id: str, cfg: Optional[Settings] = None) -> str:
    """
    Issue a signed token asserting ``{sub: user_id, scope: "auth"}``.

    Every call yields a distinct token (random ``jti``), so two logins from
    different devices never collide in the stored token set.
    """
    cfg = cfg or default_settings
    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "scope": TOKEN_SCOPE,
        "iat": int(now.timestamp()),
        "jti": uuid.uuid4().hex,
    }
    if cfg.access_token_expire_minutes:
        expire = now + timedelta(minutes=cfg.access_token_expire_minutes)
        to_encode["exp"] = int(expire.timestamp())
    return jwt.encode(to_encode, cfg.secret_key, algorithm=cfg.algorithm)


def verify_token(token: str, cfg: Optional[Settings] = None) -> Optional[str]:
    """
    Verify a token's signature and claims.

    Returns the subject user id, or None for anything that does not check
    out (bad signature, wrong secret, malformed structure, expired, wrong
    scope).
    """
    cfg = cfg or default_settings
    if not token or not isinstance(token, str):
        return None
    try:
        payload = jwt.decode(token, cfg.secret_key, algorithms=[cfg.algorithm])
    except (JWTError, ValueError, TypeError):
        return None

    subject = payload.get("sub")
    if payload.get("scope") != TOKEN_SCOPE or not isinstance(subject, str) or not subject:
        return None
    return subject
