"""
Identity Core - credential storage, password hashing and token issuance.
"""

from authcore.kernel.identity.password import (
    PasswordHasher,
    hash_password,
    verify_password,
    hash_password_async,
    verify_password_async,
)
from authcore.kernel.identity.jwt import JWTManager, TokenPair
from authcore.kernel.identity.exceptions import IdentityError, EmailAlreadyExistsError
from authcore.kernel.identity.user_repository import UserRepository, SqlAlchemyUserRepository
from authcore.kernel.identity.auth_service import AuthService

__all__ = [
    "PasswordHasher",
    "hash_password",
    "verify_password",
    "hash_password_async",
    "verify_password_async",
    "JWTManager",
    "TokenPair",
    "IdentityError",
    "EmailAlreadyExistsError",
    "UserRepository",
    "SqlAlchemyUserRepository",
    "AuthService",
]
