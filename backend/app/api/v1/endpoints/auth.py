"""
Authentication API endpoints.

Phone + password login, current-user lookup and logout.
"""

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.dependencies import get_current_user, security
from backend.app.core.exceptions import AuthenticationError
from backend.app.core.jwt import create_access_token
from backend.app.core.redis_client import get_redis
from backend.app.core.token_revocation import revoke_token
from backend.app.db.session import get_db
from backend.app.schemas.auth import LoginRequest, LoginResponse, LogoutResponse
from backend.app.schemas.user import UserResponse
from backend.app.services import auth_service, user_service
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Login with phone and password.

    Returns the user's id, name, phone and role plus a bearer token.
    Failed attempts are recorded in the audit log.
    """
    try:
        user = await auth_service.authenticate(db, credentials.phone, credentials.password)
    except AuthenticationError:
        await log_event(db, AuditAction.LOGIN_FAILED, phone=str(credentials.phone))
        raise

    access_token = create_access_token(data={
        "sub": user.phone,
        "user_id": user.id,
        "role": user.role,
    })
    await log_event(db, AuditAction.LOGIN_SUCCESS, user_id=user.id, phone=user.phone)

    return LoginResponse(
        id=user.id,
        name=user.name,
        phone=user.phone,
        role=user.role,
        access_token=access_token,
        token_type="bearer"
    )


@router.get("/auth/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the user the bearer token was issued to."""
    user = await user_service.get_user(db, current_user["user_id"])
    return UserResponse.model_validate(user)


@router.post("/auth/logout", response_model=LogoutResponse)
async def logout(
    current_user: dict = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
    redis_client=Depends(get_redis)
):
    """Revoke the presented bearer token."""
    revoked = await revoke_token(redis_client, credentials.credentials, current_user["user_id"])
    if revoked:
        await log_event(db, AuditAction.TOKEN_REVOKED, user_id=current_user["user_id"])
    return LogoutResponse(ok=revoked)
