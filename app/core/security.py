"""
Security utilities for authentication
Handles JWT access tokens and guest session tokens
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import secrets
import logging

from .config import settings
from .exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token"""
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """Decode and validate JWT token"""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise UnauthorizedException("Invalid authentication credentials")

    @staticmethod
    def generate_session_id() -> str:
        """Generate an opaque guest session token"""
        return secrets.token_urlsafe(24)

class JWTAuthResolver:
    """
    Validates bearer tokens issued by the auth service.
    Returns the user id for a valid access token and None for anything else.
    """

    def validate(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        try:
            payload = SecurityUtils.decode_token(token)
        except UnauthorizedException:
            logger.debug("Rejected bearer token, falling back to guest")
            return None

        if payload.get("type") != "access":
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None
        return str(user_id)
