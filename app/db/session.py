# File: app/db/session.py

"""
Storage client.

``Database`` owns the SQLAlchemy engine and session factory. One instance is
built at application startup, kept on ``app.state.db`` and disposed on
shutdown; request handlers get a per-request ``Session`` through
``app.api.deps.get_db``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError, IntegrityError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.errors import StorageUnavailable

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


class Database:
    def __init__(self, url: str, timeout_seconds: float = 5.0, echo: bool = False):
        self.url = url
        engine_kwargs: dict = {"echo": echo}

        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {
                "check_same_thread": False,
                "timeout": timeout_seconds,
            }
            if _is_memory_sqlite(url):
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["pool_pre_ping"] = True
            engine_kwargs["pool_timeout"] = timeout_seconds
            if url.startswith("postgresql"):
                engine_kwargs["connect_args"] = {
                    "connect_timeout": max(1, int(timeout_seconds)),
                    "options": f"-c statement_timeout={int(timeout_seconds * 1000)}",
                }

        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    """
    Roll back and translate driver / pool failures into ``StorageUnavailable``.

    Integrity violations are re-raised untouched; callers decide what a
    constraint failure means for them.
    """
    try:
        yield
    except IntegrityError:
        db.rollback()
        raise
    except (DBAPIError, PoolTimeoutError) as exc:
        db.rollback()
        logger.error("Storage failure during %s", action, exc_info=exc)
        raise StorageUnavailable(action) from exc
