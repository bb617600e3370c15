# File: app/services/auth_service.py

"""
Authentication service.

  - User lookup
  - Registration and login (password verification, token issue)
  - Session token storage: append on login, remove on logout

Tokens are rows in ``user_tokens``; a token is only honoured while its row
exists, which is what makes logout effective for otherwise stateless JWTs.
"""

import logging
from functools import lru_cache
from typing import Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import AuthError, FieldError, ValidationError
from app.core.security import TOKEN_SCOPE, create_access_token, hash_password, verify_password
from app.db.session import storage_errors
from app.models.base import parse_id
from app.models.user import User, UserToken
from app.services.validation import validate_credentials

logger = logging.getLogger(__name__)


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password("not-a-real-password", rounds=rounds)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    with storage_errors(db, "user lookup"):
        return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def find_user_by_token(db: Session, *, user_id: str, token: str) -> Optional[User]:
    """Return the user only if ``token`` is still in their stored token set."""
    user_id = parse_id(user_id)
    if user_id is None:
        return None
    stmt = (
        select(User)
        .join(UserToken, UserToken.user_id == User.id)
        .where(
            User.id == user_id,
            UserToken.token == token,
            UserToken.scope == TOKEN_SCOPE,
        )
        .limit(1)
    )
    with storage_errors(db, "token lookup"):
        return db.execute(stmt).scalar_one_or_none()


def issue_token(db: Session, user: User, cfg: Settings) -> str:
    """Sign a new token for ``user`` and append it to their token set."""
    token = create_access_token(user.id, cfg)
    with storage_errors(db, "token issue"):
        db.add(UserToken(user_id=user.id, scope=TOKEN_SCOPE, token=token))
        db.commit()
    return token


def register_user(
    db: Session,
    cfg: Settings,
    *,
    email: Optional[str],
    password: Optional[str],
) -> Tuple[User, str]:
    """
    Create a user and their first session token in one transaction.

    Raises ValidationError for a malformed email, a short password or an
    email that is already registered.
    """
    result = validate_credentials(email, password)
    result.raise_for_errors()
    email = result.data["email"]

    duplicate = ValidationError([FieldError("email", f"{email} is already registered")])
    if get_user_by_email(db, email) is not None:
        raise duplicate

    user = User(email=email, password_hash=hash_password(result.data["password"], cfg.bcrypt_rounds))
    try:
        with storage_errors(db, "user registration"):
            db.add(user)
            db.flush()
            token = create_access_token(user.id, cfg)
            db.add(UserToken(user_id=user.id, scope=TOKEN_SCOPE, token=token))
            db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration of the same email
        raise duplicate from exc

    logger.info("Registered user %s", user.id)
    return user, token


def authenticate_user(
    db: Session,
    cfg: Settings,
    *,
    email: Optional[str],
    password: Optional[str],
) -> User:
    """
    Look up a user by email and verify the password.

    Raises the same AuthError whether the email is unknown or the password
    is wrong.
    """
    if not isinstance(email, str) or not isinstance(password, str):
        raise AuthError()

    user = get_user_by_email(db, email.strip())
    if user is None:
        # Burn the same bcrypt time as a real check
        verify_password(password, _dummy_hash(cfg.bcrypt_rounds))
        logger.debug("Login rejected: unknown email")
        raise AuthError()

    if not verify_password(password, user.password_hash):
        logger.debug("Login rejected: bad password for user %s", user.id)
        raise AuthError()
    return user


def login_user(
    db: Session,
    cfg: Settings,
    *,
    email: Optional[str],
    password: Optional[str],
) -> Tuple[User, str]:
    """Verify credentials and issue an additional token; other devices stay logged in."""
    user = authenticate_user(db, cfg, email=email, password=password)
    token = issue_token(db, user, cfg)
    logger.info("Login: user %s", user.id)
    return user, token


def revoke_token(db: Session, *, user_id: str, token: str) -> None:
    """Remove exactly ``token`` from the user's token set. Removing an absent token is fine."""
    stmt = delete(UserToken).where(UserToken.user_id == user_id, UserToken.token == token)
    with storage_errors(db, "token revoke"):
        result = db.execute(stmt)
        db.commit()
    logger.info("Logout: user %s (%d token(s) removed)", user_id, result.rowcount)
