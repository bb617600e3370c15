# File: app/schemas/user.py

from typing import Optional

from pydantic import BaseModel


class UserCredentials(BaseModel):
    """Body of POST /users and POST /users/login. Unknown keys are dropped."""

    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    id: str
    email: str

    class Config:
        from_attributes = True  # Pydantic v2: replaces orm_mode


class AuthResponse(BaseModel):
    user: UserRead
    token: str
