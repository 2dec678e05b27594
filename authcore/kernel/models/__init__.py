"""
Kernel data models.
"""

from authcore.kernel.models.base import Base, TimestampMixin
from authcore.kernel.models.user import User, UserRole

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "UserRole",
]
