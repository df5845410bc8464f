"""
Authentication service: phone + password login.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import AuthenticationError, InvalidArgumentError
from backend.app.core.security import verify_password
from backend.app.models.user import User
from backend.app.services.user_service import find_user_by_phone
from backend.app.services.validation import is_blank

INVALID_CREDENTIALS = "invalid credentials"


async def authenticate(db: AsyncSession, phone: Any, password: Any) -> User:
    """
    Return the user owning ``phone`` if ``password`` matches.

    Unknown phone and wrong password fail identically.

    Raises:
        InvalidArgumentError: phone or password missing
        AuthenticationError: credentials do not match
    """
    if is_blank(phone) or is_blank(password):
        raise InvalidArgumentError("phone and password are required")

    user = await find_user_by_phone(db, str(phone).strip())
    if user is None or not verify_password(str(password), user.hashed_password):
        raise AuthenticationError(INVALID_CREDENTIALS)
    return user
