# File: app/core/config.py

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _optional_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw or raw == "0":
        return None
    return int(raw)


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "Task Tracker API"
    VERSION: str = "0.1.0"

    # Routers mount here; empty keeps /users and /tasks at the root
    api_prefix: str = os.getenv("API_PREFIX", "")
    debug: bool = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    backend_cors_origins: List[str] = Field(
        default_factory=lambda: os.getenv(
            "BACKEND_CORS_ORIGINS", "http://localhost:4200,http://127.0.0.1:4200"
        ),
        validate_default=True,
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./tasks.db")
    db_timeout_seconds: float = float(os.getenv("DB_TIMEOUT_SECONDS", "5"))

    # Security / auth
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    algorithm: str = "HS256"
    access_token_expire_minutes: Optional[int] = _optional_int(
        "ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 30
    )
    auth_header: str = os.getenv("AUTH_HEADER", "x-auth")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []

    @field_validator("bcrypt_rounds")
    @classmethod
    def check_bcrypt_rounds(cls, v: int) -> int:
        # bcrypt only accepts cost factors in this range
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
