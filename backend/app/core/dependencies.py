"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from backend.app.core.exceptions import TokenRevokedError
from backend.app.core.jwt import decode_access_token
from backend.app.core.redis_client import get_redis
from backend.app.core.token_revocation import is_token_revoked
from backend.app.db.session import get_db, get_session_factory
from backend.app.models.user import User
from backend.app.services.sequence_allocator import SequenceAllocator

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    1. Validates JWT token signature and expiry
    2. Checks if token has been revoked (logout)
    3. Verifies user still exists in database (deleted users lose access)

    Returns:
        Decoded token payload containing user information

    Raises:
        HTTPException: 401 for an invalid token or a user that no longer exists
        TokenRevokedError: 401 if the token was revoked by logout
    """
    token = credentials.credentials

    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if await is_token_revoked(redis_client, token):
        raise TokenRevokedError()

    user = await db.get(User, str(user_id))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


def get_sequence_allocator(
    session_factory: async_sessionmaker = Depends(get_session_factory)
) -> SequenceAllocator:
    """FastAPI dependency building the id allocator on the app's session factory."""
    return SequenceAllocator(session_factory)
