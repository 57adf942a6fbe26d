"""
Shared test fixtures.

Every test gets a fresh in-memory SQLite database. Services are built
directly against it, and the API client has its dependencies overridden to
use the same database, a low-cost bcrypt hasher and a test signing key.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from todo_service.core.database import Base, get_db
from todo_service.core.security import TokenService, get_token_service
from todo_service.models import task as task_model, user as user_model  # noqa: F401
from todo_service.repositories.task_store import TaskStore
from todo_service.repositories.user_store import CredentialStore
from todo_service.services.task_service import TaskService
from todo_service.services.user_service import UserService
from todo_service.utils.security import PasswordHasher, get_password_hasher


TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(TEST_JWT_SECRET, expire_minutes=60)


@pytest.fixture
def task_service(db_session) -> TaskService:
    return TaskService(TaskStore(db_session))


@pytest.fixture
def user_service(db_session, password_hasher, token_service) -> UserService:
    return UserService(CredentialStore(db_session), password_hasher, token_service)


@pytest.fixture
def client(session_factory, password_hasher, token_service):
    from todo_service.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[get_token_service] = lambda: token_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client, username: str, email: str = None, password: str = "secret123") -> dict:
    """Register a user through the API and return its bearer headers."""
    email = email or f"{username}@example.com"
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def alice_headers(client) -> dict:
    return register_and_login(client, "alice")


@pytest.fixture
def bob_headers(client) -> dict:
    return register_and_login(client, "bob")


@pytest.fixture
def login_as(client):
    """Register and log in an extra user: ``login_as("carol")``."""
    def _login(username: str, **kwargs) -> dict:
        return register_and_login(client, username, **kwargs)
    return _login


@pytest.fixture
def jwt_secret() -> str:
    return TEST_JWT_SECRET
