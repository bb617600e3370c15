# File: app/api/deps.py

import logging
from collections.abc import Generator
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import Unauthenticated
from app.core.security import verify_token
from app.models.user import User
from app.services.auth_service import find_user_by_token

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """The authenticated user plus the exact token they presented."""

    user: User
    token: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
) -> AuthContext:
    """
    Resolve the session token header to a user, or raise Unauthenticated.

    A token must both verify and still be present in the user's stored
    token set; logged-out tokens fail here even though their signature is
    fine.
    """
    token = request.headers.get(cfg.auth_header)
    if not token:
        raise Unauthenticated()

    user_id = verify_token(token, cfg)
    if user_id is None:
        logger.debug("Rejected token: failed verification")
        raise Unauthenticated()

    user = find_user_by_token(db, user_id=user_id, token=token)
    if user is None:
        logger.debug("Rejected token: not in token set of user %s", user_id)
        raise Unauthenticated()

    return AuthContext(user=user, token=token)
