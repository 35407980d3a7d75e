# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "sql"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["INVITE_REQUIRED"] = "true"

from energy_pros.core.security import create_session_token, hash_password
from energy_pros.db.session import Base
from energy_pros.main import app as fastapi_app
from energy_pros.models import Invite, Post, User
from energy_pros.repositories import MemoryStorage, SqlStorage, Storage, get_storage

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "s3cret-pass"

_USER_COUNTER = count(1)


class FakeClock:
    """Deterministic clock for time-dependent services."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(params=["memory", "sql"])
def storage(request: pytest.FixtureRequest, clock: FakeClock) -> Storage:
    """Each storage-level test runs against both backends."""
    if request.param == "memory":
        return MemoryStorage(clock=clock)
    return SqlStorage(request.getfixturevalue("db_session"))


@pytest.fixture()
def sql_storage(db_session: Session) -> SqlStorage:
    return SqlStorage(db_session)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_storage_dependency(app: FastAPI, request: pytest.FixtureRequest) -> Iterator[None]:
    if "client" not in request.fixturenames:
        yield
        return
    session: Session = request.getfixturevalue("db_session")

    def _get_storage_override() -> Generator[Storage, None, None]:
        storage = SqlStorage(session)
        try:
            yield storage
        except Exception:
            storage.rollback()
            raise

    app.dependency_overrides[get_storage] = _get_storage_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_storage, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(sql_storage: SqlStorage) -> Callable[..., User]:
    """Create and commit a member directly in the test database."""

    def _make_user(username: str | None = None, **overrides: object) -> User:
        suffix = next(_USER_COUNTER)
        username = username or f"member{suffix}"
        user = sql_storage.create_user(
            username=username,
            email=str(overrides.get("email", f"{username}@example.com")),
            password=hash_password(str(overrides.get("password", TEST_PASSWORD))),
            full_name=str(overrides.get("full_name", f"Member {suffix}")),
        )
        sql_storage.commit()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    return make_user("alice", full_name="Alice Grid")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("bob", full_name="Bob Turbine")


def bearer_for(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_session_token(user.id)}"}


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    return bearer_for(test_user)


@pytest.fixture()
def other_headers(other_user: User) -> dict[str, str]:
    return bearer_for(other_user)


@pytest.fixture()
def make_post(sql_storage: SqlStorage) -> Callable[..., Post]:
    def _make_post(author: User, hashtag: str = "#gridcode", **overrides: object) -> Post:
        post = sql_storage.create_post(
            content=str(overrides.get("content", "Grid code compliance discussion")),
            hashtag=hashtag,
            user_id=author.id,
            is_anonymous=bool(overrides.get("is_anonymous", False)),
            post_type=str(overrides.get("post_type", "general")),
            structured_data=None,
        )
        sql_storage.commit()
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    return make_post(test_user)


@pytest.fixture()
def invite(sql_storage: SqlStorage, test_user: User) -> Invite:
    created = sql_storage.create_invite(code="WELCOME2024", invited_by_user_id=test_user.id)
    sql_storage.commit()
    return created


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    return bearer_for
