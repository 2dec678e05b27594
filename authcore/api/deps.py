"""
FastAPI dependencies for database sessions and the authentication service.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.config import Settings, get_settings
from authcore.database import get_db
from authcore.kernel.identity.auth_service import AuthService
from authcore.kernel.identity.user_repository import SqlAlchemyUserRepository


DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_auth_service(db: DbSession, settings: AppSettings) -> AuthService:
    """Build an AuthService bound to the request's session."""
    users = SqlAlchemyUserRepository(db, bcrypt_rounds=settings.bcrypt_rounds)
    return AuthService.from_settings(users, settings)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
