"""
Pydantic schemas.
"""

from authcore.schemas.common import ServiceResponse, ResponseStatus, HealthResponse
from authcore.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RefreshTokenRequest,
    LoginResponse,
    UserResponse,
    EmailExistsResponse,
    RefreshTokenResponse,
)

__all__ = [
    "ServiceResponse",
    "ResponseStatus",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "RefreshTokenRequest",
    "LoginResponse",
    "UserResponse",
    "EmailExistsResponse",
    "RefreshTokenResponse",
]
