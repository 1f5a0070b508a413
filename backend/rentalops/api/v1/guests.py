"""Guests API router.

Guest records are shared across properties and keyed by email. An owner sees
the guests who stayed at one of their properties. Guests are never deleted
through the API; blacklisting is the way to stop doing business with one.
The list can also be summarised (/stats) or downloaded (/export/csv).
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_db, get_property_manager
from rentalops.models.guest import Guest
from rentalops.models.guest_stay import GuestStay
from rentalops.models.property import Property
from rentalops.models.user import User, UserRole
from rentalops.schemas.guest import (
    GuestListResponse,
    GuestResponse,
    GuestStatsResponse,
    GuestStayRating,
    GuestStayResponse,
    GuestUpdate,
)
from rentalops.services import guests as guest_service
from rentalops.services.guests import GuestStats

router = APIRouter(prefix="/api/v1/guests", tags=["guests"])


def _owner_scope(user: User) -> uuid.UUID | None:
    """Whose properties bound the user's guest list; ``None`` for admins."""
    return None if user.role == UserRole.ADMIN else user.id


def _visible_to(user: User):
    """Filter clause: guests with at least one stay at one of the user's properties."""
    return guest_service.stayed_with(_owner_scope(user))


async def _get_guest(db: AsyncSession, guest_id: uuid.UUID, user: User) -> Guest:
    result = await db.execute(select(Guest).where(Guest.id == guest_id, _visible_to(user)))
    guest = result.scalar_one_or_none()
    if guest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guest not found",
        )
    return guest


@router.get(
    "",
    response_model=GuestListResponse,
    summary="List guests with optional search",
)
async def list_guests(
    search: str | None = Query(None, description="Search by name or email (case-insensitive)"),
    tag: str | None = Query(None, description="Only guests carrying this tag"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> dict:
    """Return a paginated list of guests, most recent stay first."""
    base_filter = [_visible_to(current_user)]

    if search:
        search_pattern = f"%{search}%"
        base_filter.append(
            or_(
                Guest.name.ilike(search_pattern),
                Guest.email.ilike(search_pattern),
            )
        )
    if tag:
        base_filter.append(Guest.tags.contains([tag]))

    # Count total matching guests
    total_result = await db.execute(select(func.count()).select_from(Guest).where(*base_filter))
    total = total_result.scalar_one()

    # Fetch page
    items_query = (
        select(Guest)
        .where(*base_filter)
        .order_by(Guest.last_stay_date.desc().nulls_last(), Guest.email)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return {"items": items, "total": total}


@router.get(
    "/stats",
    response_model=GuestStatsResponse,
    summary="Guest totals for the caller's properties",
)
async def get_guest_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> GuestStats:
    return await guest_service.guest_stats(db, _owner_scope(current_user))


@router.get(
    "/export/csv",
    response_class=Response,
    summary="Download guests as CSV",
)
async def export_guests_csv(
    marketing_opt_in: bool | None = Query(None, description="Only guests with this opt-in state"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Response:
    """Export the visible guests, most recent stay first, as a CSV attachment."""
    query = select(Guest).where(_visible_to(current_user))
    if marketing_opt_in is not None:
        query = query.where(Guest.marketing_opt_in.is_(marketing_opt_in))
    result = await db.execute(query.order_by(Guest.last_stay_date.desc().nulls_last(), Guest.email))

    return Response(
        content=guest_service.guests_csv(list(result.scalars().all())),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="guests.csv"'},
    )


@router.put(
    "/stays/{stay_id}/rate",
    response_model=GuestStayResponse,
    summary="Rate a guest's stay",
)
async def rate_guest_stay(
    stay_id: uuid.UUID,
    body: GuestStayRating,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> GuestStay:
    """Record the owner's 1-5 rating and notes for a stay at one of their properties."""
    query = select(GuestStay).where(GuestStay.id == stay_id)
    if current_user.role != UserRole.ADMIN:
        query = query.join(Property, Property.id == GuestStay.property_id).where(
            Property.user_id == current_user.id
        )
    stay = (await db.execute(query)).scalar_one_or_none()
    if stay is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guest stay not found",
        )

    stay = await guest_service.rate_guest_stay(db, stay, rating=body.rating, review=body.review)
    await db.refresh(stay)
    return stay


@router.get(
    "/{guest_id}",
    response_model=GuestResponse,
    summary="Get a guest by ID",
)
async def get_guest(
    guest_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Guest:
    return await _get_guest(db, guest_id, current_user)


@router.put(
    "/{guest_id}",
    response_model=GuestResponse,
    summary="Update a guest",
)
async def update_guest(
    guest_id: uuid.UUID,
    body: GuestUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Guest:
    """Partially update a guest. Only explicitly provided fields are changed.

    Clearing the blacklist flag also clears the reason.
    """
    guest = await _get_guest(db, guest_id, current_user)

    update_data = body.model_dump(exclude_unset=True)
    if update_data.get("is_blacklisted") is False:
        update_data["blacklist_reason"] = None

    for field, value in update_data.items():
        setattr(guest, field, value)

    await db.flush()
    await db.refresh(guest)
    return guest
