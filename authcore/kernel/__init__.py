"""
Kernel layer: persistence models and the identity core.

The identity core depends on persistence only through UserRepository.
"""

from authcore.kernel.models import User, UserRole

__all__ = [
    "User",
    "UserRole",
]
