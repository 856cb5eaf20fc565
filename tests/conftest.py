"""
Shared test fixtures and utilities.

The application is built with an in-memory user store and a low bcrypt
cost, so no database is needed outside the repository tests.
"""

from datetime import timedelta
from typing import Dict, Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient

from authgate.adapters.configuration.config import Settings
from authgate.adapters.outbound.security.password_hasher import PasslibPasswordHasher
from authgate.adapters.outbound.security.rate_limiter import InMemoryRateLimiter
from authgate.adapters.outbound.security.token_blacklist import InMemoryTokenBlacklist
from authgate.adapters.outbound.security.token_codec import JoseTokenCodec
from authgate.application.ports.outbound import IUserRepository
from authgate.domain.models.principal import DEFAULT_AUTHORITY
from authgate.domain.models.user_domain_model import Permission, Role, User
from authgate.domain.services.token_service import TokenService
from authgate.main import create_app


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-authgate-tests-0123456789"


class InMemoryUserRepository(IUserRepository):
    """User store backed by a dict, for tests."""

    def __init__(self, users: Iterable[User]):
        self.users: Dict[str, User] = {user.username: user for user in users}

    async def find_by_username(self, username: str) -> Optional[User]:
        return self.users.get(username)

    async def get_authorities(self, user_id: int) -> List[str]:
        for user in self.users.values():
            if user.id == user_id:
                return user.authorities()
        return [DEFAULT_AUTHORITY]


def make_settings(**overrides) -> Settings:
    values = dict(
        JWT_SECRET=TEST_JWT_SECRET,
        BCRYPT_ROUNDS=4,
        ENVIRONMENT="testing",
        DB_CREATE_TABLES=False,
        SEED_DEFAULT_DATA=False,
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def login(client: TestClient, username: str = "alice", password: str = "secret") -> dict:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture(scope="session")
def password_hasher() -> PasslibPasswordHasher:
    return PasslibPasswordHasher(rounds=4)


@pytest.fixture(scope="session")
def users(password_hasher) -> List[User]:
    """alice (enabled, USER role), bob (disabled), carol (tenant admin)."""
    user_role = Role(
        id=1,
        role_code="USER",
        role_name="User",
        permissions=[Permission(id=1, permission_code="user:view", permission_name="View users")],
    )
    admin_role = Role(
        id=2,
        role_code="ADMIN",
        role_name="Administrator",
        permissions=[
            Permission(id=1, permission_code="user:view", permission_name="View users"),
            Permission(id=2, permission_code="user:create", permission_name="Create user"),
        ],
    )
    return [
        User(
            id=1,
            username="alice",
            password=password_hasher.hash("secret"),
            email="alice@example.com",
            real_name="Alice",
            roles=[user_role],
        ),
        User(
            id=2,
            username="bob",
            password=password_hasher.hash("secret"),
            status=0,
            roles=[user_role],
        ),
        User(
            id=3,
            username="carol",
            password=password_hasher.hash("secret"),
            tenant_id=42,
            roles=[admin_role],
        ),
    ]


@pytest.fixture
def user_repository(users) -> InMemoryUserRepository:
    return InMemoryUserRepository(users)


@pytest.fixture
def token_blacklist() -> InMemoryTokenBlacklist:
    return InMemoryTokenBlacklist()


@pytest.fixture
def token_service(token_blacklist) -> TokenService:
    return TokenService(
        JoseTokenCodec(),
        token_blacklist,
        TEST_JWT_SECRET,
        issuer="authgate-test",
        access_ttl=timedelta(hours=1),
        refresh_ttl=timedelta(days=7),
    )


@pytest.fixture
def app(test_settings, user_repository, password_hasher, token_blacklist):
    return create_app(
        test_settings,
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_blacklist=token_blacklist,
        rate_limiter=InMemoryRateLimiter(window_seconds=test_settings.RATE_LIMIT_WINDOW_SECONDS),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def alice_tokens(client) -> dict:
    return login(client)
