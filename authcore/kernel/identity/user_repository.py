"""
Credential store: user persistence behind a narrow async interface.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from authcore.kernel.identity.exceptions import EmailAlreadyExistsError
from authcore.kernel.identity.password import BCRYPT_ROUNDS, hash_password_async
from authcore.kernel.models.user import User
from authcore.logging_config import get_logger

logger = get_logger(__name__)

# Name given by the model naming convention and the users migration
EMAIL_UNIQUE_INDEX = "ix_users_email"

# Columns that update() may overwrite
MUTABLE_FIELDS = frozenset({
    "email",
    "name",
    "role",
    "phone_number",
    "birth_date",
    "gender",
    "avatar",
    "age",
    "doctor_id",
})


def is_duplicate_email(exc: IntegrityError) -> bool:
    """True only when exc is a violation of the users.email unique index."""
    orig = exc.orig
    # asyncpg names the violated constraint
    constraint = getattr(getattr(orig, "__cause__", None), "constraint_name", None)
    if constraint is not None:
        return constraint == EMAIL_UNIQUE_INDEX
    # sqlite names the table and column instead
    return f"UNIQUE constraint failed: {User.__tablename__}.email" in str(orig)


class UserRepository(ABC):
    """Repository interface for user records."""

    async def _flush(self, email: str) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            if is_duplicate_email(e):
                raise EmailAlreadyExistsError(email) from e
            raise

    @abstractmethod
    async def find_all(self) -> list[User]:
        """List all users."""

    @abstractmethod
    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Find a user by ID."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by exact email."""

    @abstractmethod
    async def create(self, user_data: dict[str, Any]) -> User:
        """Persist a new user. Uniqueness is the caller's concern."""

    @abstractmethod
    async def update(self, user_id: uuid.UUID, user_data: dict[str, Any]) -> Optional[User]:
        """Overwrite mutable fields; returns the updated user."""

    @abstractmethod
    async def change_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        """Hash and store a new plaintext password."""


class SqlAlchemyUserRepository(UserRepository):
    """
    SQLAlchemy implementation of UserRepository.
    
    Writes are flushed, not committed. The session owner commits, and rolls
    back after a failed write.
    """

    def __init__(self, session: AsyncSession, bcrypt_rounds: int = BCRYPT_ROUNDS) -> None:
        self._session = session
        self._bcrypt_rounds = bcrypt_rounds

    async def find_all(self) -> list[User]:
        result = await self._session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create(self, user_data: dict[str, Any]) -> User:
        user = User(**user_data)
        self._session.add(user)
        await self._flush(user_data.get("email", ""))
        # Load server-side timestamps
        await self._session.refresh(user)
        logger.info("Created user", extra={"user_id": str(user.id)})
        return user

    async def update(self, user_id: uuid.UUID, user_data: dict[str, Any]) -> Optional[User]:
        rejected = set(user_data) - MUTABLE_FIELDS
        if rejected:
            raise ValueError(f"Unknown or read-only user field(s): {', '.join(sorted(rejected))}")

        user = await self.find_by_id(user_id)
        if user is None:
            return None

        for key, value in user_data.items():
            setattr(user, key, value)
        await self._flush(user_data.get("email", ""))
        await self._session.refresh(user)
        return user

    async def change_password(self, user_id: uuid.UUID, new_password: str) -> Optional[User]:
        user = await self.find_by_id(user_id)
        if user is None:
            return None

        user.password_hash = await hash_password_async(new_password, self._bcrypt_rounds)
        await self._session.flush()
        await self._session.refresh(user)
        logger.info("Password changed", extra={"user_id": str(user.id)})
        return user
