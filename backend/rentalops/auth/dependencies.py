"""FastAPI authentication and role dependencies for route protection."""

from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.auth.jwt import TokenError, read_access_token
from rentalops.database import get_db
from rentalops.models.user import User, UserRole

# auto_error=False so a missing header gets the same 401 as a bad token
_bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Return the user named by the bearer token.

    Raises:
        HTTPException 401: If the token is missing, invalid, expired, of the
            wrong type, or names a user that does not exist.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        claims = read_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from None

    user = await db.get(User, claims.user_id)
    if user is None:
        raise _unauthorized("Could not validate credentials")
    return user


async def get_current_active_user(
    user: User = Depends(get_current_user),
) -> User:
    """Return the current user only if their account is active.

    Raises:
        HTTPException 403: If the user account is inactive.
    """
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return user


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[User]]:
    """Build a dependency that admits active users holding one of ``roles``."""

    async def _check_role(user: User = Depends(get_current_active_user)) -> User:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _check_role


# Owners manage their own properties; admins may act on any property.
get_property_manager = require_roles(UserRole.OWNER, UserRole.ADMIN)
