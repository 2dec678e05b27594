"""Integration tests for /api/v1/auth endpoints."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from authcore.api.deps import get_auth_service
from authcore.config import get_settings
from authcore.database import get_db
from authcore.kernel.identity.auth_service import AuthService
from authcore.kernel.identity.jwt import JWTManager
from authcore.kernel.identity.password import hash_password
from authcore.kernel.identity.user_repository import SqlAlchemyUserRepository
from authcore.kernel.models.user import UserRole
from authcore.main import app


@pytest_asyncio.fixture
async def session_maker(db_engine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Async client whose requests use the per-test in-memory database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def manager(session_maker):
    async with session_maker() as session:
        user = await SqlAlchemyUserRepository(session).create({
            "email": "manager@example.com",
            "name": "Manager",
            "password_hash": hash_password("ManagerPass123", rounds=4),
            "role": UserRole.CLIENT_MANAGER.value,
        })
        await session.commit()
        return user


async def _register(client: AsyncClient, email: str = "bob@example.com", **overrides):
    body = {
        "name": "Bob",
        "email": email,
        "password": "SecurePass123",
        "confirm_password": "SecurePass123",
    }
    body.update(overrides)
    return await client.post("/api/v1/auth/register", json=body)


@pytest.mark.asyncio
async def test_register_new_user(client: AsyncClient):
    response = await _register(client)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Success"
    assert body["message"] == "User registered successfully"
    assert body["data"]["email"] == "bob@example.com"
    assert body["data"]["role"] == "client-user"
    assert "password_hash" not in body["data"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient):
    await _register(client)
    response = await _register(client, name="Second Bob")

    assert response.status_code == 422
    assert response.json() == {
        "status": "Failed",
        "message": "Email is already in use",
        "data": None,
        "status_code": 422,
    }


@pytest.mark.asyncio
async def test_register_password_mismatch(client: AsyncClient):
    response = await _register(client, confirm_password="Different123")

    assert response.status_code == 422
    assert response.json()["message"] == "Passwords do not match"

    check = await client.get("/api/v1/auth/check-email", params={"email": "bob@example.com"})
    assert check.json()["data"] == {"exists": False}


@pytest.mark.asyncio
async def test_register_missing_field(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "bob@example.com", "password": "x"},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Validation error"
    fields = {e["field"] for e in body["errors"]}
    assert "body.name" in fields
    assert "body.confirm_password" in fields


@pytest.mark.asyncio
async def test_register_rejects_password_over_72_bytes(client: AsyncClient):
    long_password = "a" * 72 + "REAL-SUFFIX"
    response = await _register(client, password=long_password, confirm_password=long_password)

    assert response.status_code == 422
    assert response.json()["detail"] == "Validation error"
    assert "body.password" in {e["field"] for e in response.json()["errors"]}

    check = await client.get("/api/v1/auth/check-email", params={"email": "bob@example.com"})
    assert check.json()["data"] == {"exists": False}


@pytest.mark.asyncio
async def test_login_with_extra_bytes_after_password_fails(client: AsyncClient):
    password = "a" * 72
    await _register(client, password=password, confirm_password=password)

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "bob@example.com", "password": password + "totally-different"},
    )

    assert response.status_code == 422
    assert response.json()["message"] == "Email or Password is not correct"


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient):
    register = await _register(client)
    user_id = register.json()["data"]["id"]

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "bob@example.com", "password": "SecurePass123"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    manager = JWTManager(get_settings().jwt_secret)
    assert manager.decode_token(data["token"])["id"] == user_id
    assert manager.decode_token(data["refresh_token"])["id"] == user_id


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    await _register(client)

    wrong_password = await client.post(
        "/api/v1/auth/login",
        json={"email": "bob@example.com", "password": "WrongPassword"},
    )
    unknown_email = await client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": "SecurePass123"},
    )

    assert wrong_password.status_code == 422
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["message"] == "Email or Password is not correct"


@pytest.mark.asyncio
async def test_login_web_requires_manager(client: AsyncClient, manager):
    await _register(client)

    client_user = await client.post(
        "/api/v1/auth/login-web",
        json={"email": "bob@example.com", "password": "SecurePass123"},
    )
    assert client_user.status_code == 422
    assert client_user.json()["message"] == "Email or Password is not correct"

    response = await client.post(
        "/api/v1/auth/login-web",
        json={"email": "manager@example.com", "password": "ManagerPass123"},
    )
    assert response.status_code == 200
    web_manager = JWTManager(get_settings().token_secret)
    assert web_manager.decode_token(response.json()["data"]["token"])["id"] == str(manager.id)


@pytest.mark.asyncio
async def test_check_email(client: AsyncClient):
    await _register(client)

    exists = await client.get("/api/v1/auth/check-email", params={"email": "bob@example.com"})
    missing = await client.get("/api/v1/auth/check-email", params={"email": "nobody@example.com"})

    assert exists.status_code == 200
    assert exists.json()["data"] == {"exists": True}
    assert missing.status_code == 200
    assert missing.json()["data"] == {"exists": False}


@pytest.mark.asyncio
async def test_refresh_token_for_any_id(client: AsyncClient):
    response = await client.post("/api/v1/auth/refresh-token", json={"user_id": "ghost"})

    assert response.status_code == 200
    token = response.json()["data"]["refresh_token"]
    assert JWTManager(get_settings().jwt_secret).decode_token(token)["userId"] == "ghost"


@pytest.mark.asyncio
async def test_store_failure_maps_to_500(client: AsyncClient, unreachable_repository):
    settings = get_settings()

    def broken_service() -> AuthService:
        return AuthService(
            users=unreachable_repository,
            jwt_manager=JWTManager(settings.jwt_secret),
            web_jwt_manager=JWTManager(settings.token_secret),
        )

    app.dependency_overrides[get_auth_service] = broken_service
    try:
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "bob@example.com", "password": "SecurePass123"},
        )
    finally:
        app.dependency_overrides.pop(get_auth_service, None)

    assert response.status_code == 500
    assert response.json()["status"] == "Failed"
    assert response.json()["message"] == "Error during login: store unreachable"


@pytest.mark.asyncio
async def test_request_id_echoed(client: AsyncClient):
    response = await client.get(
        "/api/v1/auth/check-email",
        params={"email": "x@example.com"},
        headers={"X-Request-ID": "trace-abc"},
    )

    assert response.headers["X-Request-ID"] == "trace-abc"
