"""
User account model.
"""

import uuid
from enum import Enum

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from authcore.kernel.models.base import Base, TimestampMixin


class UserRole(str, Enum):
    """User roles in the system."""
    CLIENT_USER = "client-user"
    CLIENT_MANAGER = "client-manager"


class User(Base, TimestampMixin):
    """User account model."""
    
    __tablename__ = "users"
    
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(50),
        default=UserRole.CLIENT_USER.value,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    
    # Profile fields, carried as-is
    phone_number: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    birth_date: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    gender: Mapped[str] = mapped_column(String(50), default="", nullable=False)
    avatar: Mapped[str] = mapped_column(String(1024), default="", nullable=False)
    age: Mapped[str] = mapped_column(String(10), default="", nullable=False)
    doctor_id: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    
    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.CLIENT_MANAGER.value
    
    def __repr__(self) -> str:
        return f"<User {self.email}>"
