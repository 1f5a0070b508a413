"""Shared API dependencies — single import point for all routers.

Re-exports database session and authentication dependencies so that router
modules can import everything they need from one place::

    from rentalops.api.deps import get_db, get_property_manager, get_owned_property
"""

import uuid

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.auth.dependencies import (
    get_current_active_user,
    get_current_user,
    get_property_manager,
    require_roles,
)
from rentalops.database import get_db
from rentalops.models.property import Property
from rentalops.models.user import User, UserRole
from rentalops.services.errors import LockPinError, NotFoundError, ServiceError

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_property_manager",
    "require_roles",
    "get_owned_property",
    "service_error_to_http",
]


async def get_owned_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Property:
    """Resolve ``property_id`` from the path to a property the current user manages.

    Owners only see their own properties; admins see every property.

    Raises:
        HTTPException 403: If the user is neither an owner nor an admin.
        HTTPException 404: If the property does not exist or belongs to someone else.
    """
    query = select(Property).where(Property.id == property_id)
    if current_user.role != UserRole.ADMIN:
        query = query.where(Property.user_id == current_user.id)
    result = await db.execute(query)
    prop = result.scalar_one_or_none()
    if prop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return prop


def service_error_to_http(exc: ServiceError) -> HTTPException:
    """Translate a service exception into the matching HTTP error."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, LockPinError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
