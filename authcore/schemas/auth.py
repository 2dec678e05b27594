"""
Authentication schemas.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcrypt input limit; matches authcore.kernel.identity.password.BCRYPT_MAX_BYTES
PASSWORD_MAX_BYTES = 72


class LoginRequest(BaseModel):
    """Login request."""
    
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Registration request."""
    
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    confirm_password: str = Field(..., min_length=1, max_length=128)
    
    @field_validator("password", "confirm_password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        return v


class RefreshTokenRequest(BaseModel):
    """Standalone refresh token request."""
    
    user_id: str = Field(..., min_length=1)


class TokenPair(BaseModel):
    """Access and refresh token pair."""
    
    token: str
    refresh_token: str


LoginResponse = TokenPair


class UserResponse(BaseModel):
    """Public view of a user account."""
    
    model_config = ConfigDict(from_attributes=True)
    
    id: uuid.UUID
    email: str
    name: str
    role: str
    phone_number: str = ""
    birth_date: str = ""
    gender: str = ""
    avatar: str = ""
    age: str = ""
    doctor_id: str = ""
    created_at: datetime
    updated_at: datetime


class EmailExistsResponse(BaseModel):
    """Result of an email existence probe."""
    
    exists: bool


class RefreshTokenResponse(BaseModel):
    """Standalone refresh token."""
    
    refresh_token: str
