# File: app/api/v1/routes_users.py

"""
User routes: register, login, current user, logout.

Register and login return ``{user, token}`` and also put the token in the
auth response header (``x-auth`` by default).
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, get_current_user, get_db, get_settings
from app.core.config import Settings
from app.schemas.user import AuthResponse, UserCredentials, UserRead
from app.services.auth_service import login_user, register_user, revoke_token

router = APIRouter()


@router.post("", response_model=AuthResponse, summary="Register a user")
def register(
    payload: UserCredentials,
    response: Response,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    user, token = register_user(db, cfg, email=payload.email, password=payload.password)
    response.headers[cfg.auth_header] = token
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse, summary="Log in and get a new session token")
def login(
    payload: UserCredentials,
    response: Response,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    """
    Issue an additional token. Tokens held by other devices stay valid.

    Unknown email and wrong password both yield the same empty 400.
    """
    user, token = login_user(db, cfg, email=payload.email, password=payload.password)
    response.headers[cfg.auth_header] = token
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.get("/me", response_model=UserRead, summary="Current user")
def read_me(ctx: AuthContext = Depends(get_current_user)):
    return ctx.user


@router.delete("/me/token", summary="Log out (revoke the presented token)")
def logout(
    ctx: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    revoke_token(db, user_id=ctx.user.id, token=ctx.token)
    return Response(status_code=status.HTTP_200_OK)
