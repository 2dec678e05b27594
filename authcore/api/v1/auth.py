"""
Authentication endpoints.

Each endpoint returns the service envelope as the JSON body and uses its
status_code as the HTTP status.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from authcore.api.deps import AuthServiceDep, DbSession
from authcore.schemas.auth import LoginRequest, RegisterRequest, RefreshTokenRequest
from authcore.schemas.common import ServiceResponse

router = APIRouter()


async def _respond(result: ServiceResponse, db: DbSession) -> JSONResponse:
    # Failed operations never commit
    if not result.success:
        await db.rollback()
    return JSONResponse(
        status_code=result.status_code,
        content=result.model_dump(mode="json"),
    )


@router.post("/login")
async def login(data: LoginRequest, service: AuthServiceDep, db: DbSession):
    """
    Authenticate with email and password.
    
    Returns an access token (1 day) and a refresh token (2 days).
    """
    result = await service.login(data.email, data.password)
    return await _respond(result, db)


@router.post("/login-web")
async def login_web(data: LoginRequest, service: AuthServiceDep, db: DbSession):
    """Authenticate a manager account for the web console."""
    result = await service.login_web(data.email, data.password)
    return await _respond(result, db)


@router.post("/register")
async def register(data: RegisterRequest, service: AuthServiceDep, db: DbSession):
    """Register a new client account."""
    result = await service.register(data)
    return await _respond(result, db)


@router.get("/check-email")
async def check_email(
    service: AuthServiceDep,
    db: DbSession,
    email: str = Query(..., min_length=1, max_length=255),
):
    """Report whether an account already uses this email."""
    result = await service.check_email_exists(email)
    return await _respond(result, db)


@router.post("/refresh-token")
async def refresh_token(data: RefreshTokenRequest, service: AuthServiceDep, db: DbSession):
    """Issue a standalone 7-day refresh token for a user id."""
    result = await service.generate_refresh_token(data.user_id)
    return await _respond(result, db)
