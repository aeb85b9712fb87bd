"""
Pytest configuration and fixtures for Fableration tests.
"""

import os
import tempfile

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test_secret_key_for_testing_only")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="fableration-media-"))

import pytest
from typing import Generator
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.core.database import Base, create_db_engine, create_session_factory, get_db
from app.core.auth import create_user_token, hash_password
from app.models import Author, Blog, Event, Logo, Tag, User
from app.schemas.blog import BlogCreate
from app.schemas.event import EventCreate
from app.services.blog_service import BlogService
from app.services.event_service import EventService

TEST_PASSWORD = "correct-horse-battery"

# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine with foreign keys enforced."""
    engine = create_db_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    TestingSessionLocal = create_session_factory(db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Login attempts from earlier tests must not count against later ones."""
    from app.api.endpoints.auth import limiter

    limiter.reset()
    yield


@pytest.fixture(scope="function")
def test_app(db_session):
    """Create a FastAPI test app without lifespan events."""
    from fastapi import FastAPI
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded
    from sqlalchemy.exc import SQLAlchemyError
    from app.api.endpoints.auth import limiter
    from app.core.exceptions import database_error_handler
    from app.main import include_routers

    # Create app without lifespan to avoid event loop issues
    test_app = FastAPI(title="Fableration - Test", version="1.0.0")
    test_app.state.limiter = limiter
    test_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    test_app.add_exception_handler(SQLAlchemyError, database_error_handler)

    include_routers(test_app)

    # Override database dependency
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db

    return test_app


@pytest.fixture(scope="function")
def client(test_app) -> TestClient:
    """Create a test client without entering context manager."""
    return TestClient(test_app, raise_server_exceptions=False)


@pytest.fixture(scope="function")
def test_user(db_session) -> User:
    """Create the dashboard administrator."""
    user = User(
        email="admin@example.com",
        password=hash_password(TEST_PASSWORD),
        role="admin",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user_password() -> str:
    """Plain password of ``test_user``."""
    return TEST_PASSWORD


@pytest.fixture(scope="function")
def auth_headers(test_user) -> dict:
    """Create authentication headers for test requests."""
    return {"Authorization": f"Bearer {create_user_token(test_user)}"}


@pytest.fixture(scope="function")
def test_tags(db_session) -> list:
    tags = [Tag(name="Art"), Tag(name="Music"), Tag(name="Code")]
    db_session.add_all(tags)
    db_session.commit()
    for tag in tags:
        db_session.refresh(tag)
    return tags


@pytest.fixture(scope="function")
def test_author(db_session) -> Author:
    author = Author(name="Ada Writer", bio="Writes about everything")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture(scope="function")
def test_logo(db_session) -> Logo:
    logo = Logo(name="Fableration", logo_url="/uploads/icons/logo.png", date="2024")
    db_session.add(logo)
    db_session.commit()
    db_session.refresh(logo)
    return logo


@pytest.fixture(scope="function")
def make_blog(db_session):
    """Factory creating blogs through the service, as the API does."""

    def _make_blog(title: str = "Hello World", **fields) -> Blog:
        return BlogService(db_session).create_blog(BlogCreate(title=title, **fields))

    return _make_blog


@pytest.fixture(scope="function")
def test_event(db_session) -> Event:
    return EventService(db_session).create_event(
        EventCreate(
            title="Spring Showcase",
            summary="Student work on display",
            items=[
                {"name": "Opening", "content": "Doors open"},
                {"name": "Talks"},
                {"name": "Closing"},
            ],
        )
    )
