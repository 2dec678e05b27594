"""
Pytest fixtures for authcore tests.
"""

import os

# Must be set before authcore.config is first imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["TOKEN_SECRET"] = "test-web-secret-key-for-testing-only"

import uuid
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from authcore.config import get_settings
from authcore.kernel.models.base import Base
from authcore.kernel.models.user import User, UserRole
from authcore.kernel.identity.auth_service import AuthService
from authcore.kernel.identity.jwt import JWTManager
from authcore.kernel.identity.password import hash_password
from authcore.kernel.identity.user_repository import SqlAlchemyUserRepository, UserRepository

get_settings.cache_clear()

# Low work factor keeps fixture setup fast; production rounds are tested explicitly
TEST_BCRYPT_ROUNDS = 4


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create an in-memory database shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def user_repository(db_session: AsyncSession) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(db_session, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for the primary signing secret."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=1440,
        refresh_token_expire_days=2,
    )


@pytest.fixture
def web_jwt_manager() -> JWTManager:
    """Create a JWT manager for the manager-login signing secret."""
    return JWTManager(
        secret_key="test-web-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=1440,
        refresh_token_expire_days=2,
    )


@pytest.fixture
def auth_service(
    user_repository: SqlAlchemyUserRepository,
    jwt_manager: JWTManager,
    web_jwt_manager: JWTManager,
) -> AuthService:
    return AuthService(
        users=user_repository,
        jwt_manager=jwt_manager,
        web_jwt_manager=web_jwt_manager,
        bcrypt_rounds=TEST_BCRYPT_ROUNDS,
    )


@pytest_asyncio.fixture
async def test_user(user_repository: SqlAlchemyUserRepository) -> User:
    """Create a client-user account."""
    return await user_repository.create({
        "email": "testuser@example.com",
        "password_hash": hash_password("TestPassword123", rounds=TEST_BCRYPT_ROUNDS),
        "name": "Test User",
        "role": UserRole.CLIENT_USER.value,
    })


@pytest_asyncio.fixture
async def test_manager(user_repository: SqlAlchemyUserRepository) -> User:
    """Create a client-manager account."""
    return await user_repository.create({
        "email": "manager@example.com",
        "password_hash": hash_password("ManagerPass123", rounds=TEST_BCRYPT_ROUNDS),
        "name": "Test Manager",
        "role": UserRole.CLIENT_MANAGER.value,
    })


class UnreachableUserRepository(UserRepository):
    """Store whose every call fails."""

    async def _fail(self, *args: Any) -> Any:
        raise ConnectionError("store unreachable")

    async def find_all(self) -> list[User]:
        return await self._fail()

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._fail(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._fail(email)

    async def create(self, user_data: dict[str, Any]) -> User:
        return await self._fail(user_data)

    async def update(self, user_id: uuid.UUID, user_data: dict[str, Any]) -> Optional[User]:
        return await self._fail(user_id, user_data)

    async def change_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        return await self._fail(user_id, new_password)


@pytest.fixture
def unreachable_repository() -> UserRepository:
    """A credential store that raises on every call."""
    return UnreachableUserRepository()
