"""
JWT token issuance for authentication.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from jose import JWTError, jwt

from authcore.config import Settings
from authcore.schemas.auth import TokenPair

UserId = Union[uuid.UUID, str]


class JWTManager:
    """
    JWT token creation and decoding for one signing secret.
    
    Access tokens are short-lived, refresh tokens long-lived. Both carry the
    user id under a configurable claim together with exp, iat and type.
    """
    
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 1440,
        refresh_token_expire_days: int = 2,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes
        self.refresh_token_expire_days = refresh_token_expire_days
    
    @classmethod
    def from_settings(cls, settings: Settings, secret_key: str) -> "JWTManager":
        return cls(
            secret_key=secret_key,
            algorithm=settings.jwt_algorithm,
            access_token_expire_minutes=settings.access_token_expire_minutes,
            refresh_token_expire_days=settings.refresh_token_expire_days,
        )
    
    def _encode(
        self,
        user_id: UserId,
        claim: str,
        token_type: str,
        lifetime: timedelta,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            claim: str(user_id),
            "exp": now + lifetime,
            "iat": now,
            "type": token_type,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
    
    def create_access_token(
        self,
        user_id: UserId,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a new access token.
        
        Args:
            user_id: User's unique identifier
            expires_delta: Optional custom expiration time
            
        Returns:
            Encoded token with the user id under the "id" claim
        """
        lifetime = expires_delta or timedelta(minutes=self.access_token_expire_minutes)
        return self._encode(user_id, "id", "access", lifetime)
    
    def create_refresh_token(
        self,
        user_id: UserId,
        claim: str = "id",
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """
        Create a new refresh token.
        
        Args:
            user_id: User's unique identifier
            claim: Name of the claim holding the user id
            expires_delta: Optional custom expiration time
            
        Returns:
            Encoded refresh token
        """
        lifetime = expires_delta or timedelta(days=self.refresh_token_expire_days)
        return self._encode(user_id, claim, "refresh", lifetime)
    
    def create_token_pair(self, user_id: UserId) -> TokenPair:
        """Create both access and refresh tokens for a user."""
        return TokenPair(
            token=self.create_access_token(user_id),
            refresh_token=self.create_refresh_token(user_id),
        )
    
    def decode_token(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify signature and expiry, then return the claims.
        
        Returns:
            The decoded claims if valid, None otherwise
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
