"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.errors import InsufficientPermissions, InvalidToken, TokenMissing
from clinic_booking.core.security import TokenClaims, decode_access_token
from clinic_booking.db.session import get_db
from clinic_booking.models.user import User, UserRole
from clinic_booking.services.auth import AuthService
from clinic_booking.utils.time import Clock, utc_now

# Security scheme
security = HTTPBearer(auto_error=False)


def get_clock() -> Clock:
    """Clock used for past/future decisions. Overridden in tests."""
    return utc_now


async def get_current_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> TokenClaims:
    """Extract and decode the bearer token.

    Raises:
        TokenMissing: If no bearer token was sent
        InvalidToken: If the token does not decode or has expired
    """
    if not credentials or not credentials.credentials:
        raise TokenMissing()

    claims = decode_access_token(credentials.credentials)
    if claims is None:
        raise InvalidToken()

    return claims


async def get_current_user(
    token: Annotated[TokenClaims, Depends(get_current_token)],
    session: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the authenticated user behind the bearer token.

    Raises:
        InvalidToken: If the user no longer exists or is disabled
    """
    auth_service = AuthService(session)
    user = await auth_service.get_user_by_id(token.user_id)

    if not user or not user.is_active:
        raise InvalidToken()

    return user


def require_role(*roles: UserRole):
    """Create a dependency that admits only users holding one of ``roles``.

    Usage:
        @router.get("/", dependencies=[Depends(require_role(UserRole.ADMIN))])
    """
    allowed = {role.value for role in roles}

    async def role_checker(
        user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        role = user.role.value if hasattr(user.role, "value") else user.role
        if role not in allowed:
            raise InsufficientPermissions()
        return user

    return role_checker


require_admin = require_role(UserRole.ADMIN)
require_patient = require_role(UserRole.PATIENT)


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
PatientUser = Annotated[User, Depends(require_patient)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
ClockDep = Annotated[Clock, Depends(get_clock)]
