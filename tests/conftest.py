# File: tests/conftest.py

import os

# Must be set before app.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.security import TOKEN_SCOPE, create_access_token, hash_password
from app.db.init_db import init_db
from app.db.session import Database
from app.main import create_application
from app.models.base import utcnow
from app.models.task import Task
from app.models.user import User, UserToken

SEED_USERS = [
    {"email": "russell@example.com", "password": "userOnePass"},
    {"email": "rusty@example.com", "password": "userTwoPass"},
]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret",
        access_token_expire_minutes=None,
        bcrypt_rounds=4,
    )


@pytest.fixture
def app(settings):
    return create_application(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app):
    session = app.state.db.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def database(settings):
    """A bare storage client for service-level tests, no HTTP app."""
    database = Database(settings.database_url)
    init_db(database)
    yield database
    database.dispose()


@pytest.fixture
def seed(app, settings):
    """
    Two users with one token each; user one owns an open task, user two
    owns a completed one.
    """
    session = app.state.db.session()
    users = []
    for creds in SEED_USERS:
        user = User(email=creds["email"], password_hash=hash_password(creds["password"], rounds=4))
        session.add(user)
        session.flush()
        token = create_access_token(user.id, settings)
        session.add(UserToken(user_id=user.id, scope=TOKEN_SCOPE, token=token))
        users.append(SimpleNamespace(id=user.id, token=token, **creds))

    tasks = [
        Task(title="First test task", owner_id=users[0].id),
        Task(
            title="Second test task",
            completed=True,
            completed_at=utcnow(),
            owner_id=users[1].id,
        ),
    ]
    session.add_all(tasks)
    session.commit()
    task_ids = [t.id for t in tasks]
    session.close()

    return SimpleNamespace(users=users, task_ids=task_ids)
