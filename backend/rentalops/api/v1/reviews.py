"""Reviews API router.

Reviews are created per property and listed per property or across all of the
caller's properties. Responding, publishing and marking a review helpful address
the review directly.
"""

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.api.deps import get_current_active_user, get_db, get_owned_property, get_property_manager
from rentalops.models.booking import Booking
from rentalops.models.guest import Guest
from rentalops.models.property import Property
from rentalops.models.review import Review, ReviewPlatform
from rentalops.models.user import User, UserRole
from rentalops.schemas.review import (
    OwnerResponseUpdate,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewSummaryResponse,
    ReviewUpdate,
)
from rentalops.services import reviews as review_service

router = APIRouter(prefix="/api/v1", tags=["reviews"])


async def _get_review(db: AsyncSession, review_id: uuid.UUID, owner: User | None = None) -> Review:
    """Load a review; with ``owner``, only from a property that user manages."""
    query = select(Review).where(Review.id == review_id)
    if owner is not None and owner.role != UserRole.ADMIN:
        query = query.join(Property, Property.id == Review.property_id).where(Property.user_id == owner.id)
    result = await db.execute(query)
    review = result.scalar_one_or_none()
    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review


@router.get(
    "/properties/{property_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a property",
)
async def list_reviews(
    published_only: bool = Query(False, description="Only return published reviews"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a page of reviews, newest first."""
    base_filter = [Review.property_id == prop.id]
    if published_only:
        base_filter.append(Review.is_published.is_(True))

    total = await db.scalar(select(func.count()).select_from(Review).where(*base_filter))

    result = await db.execute(
        select(Review).where(*base_filter).order_by(Review.created_at.desc()).offset(skip).limit(limit)
    )
    return {"items": list(result.scalars().all()), "total": total}


@router.get(
    "/reviews",
    response_model=ReviewListResponse,
    summary="List reviews across the caller's properties",
)
async def list_owner_reviews(
    property_id: uuid.UUID | None = Query(None, description="Only this property"),
    platform: ReviewPlatform | None = Query(None, description="Only reviews from this platform"),
    min_rating: Decimal | None = Query(None, ge=1, le=5, description="Minimum overall rating"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> dict:
    """Return reviews for every property the caller manages, newest first.

    Admins see reviews for all properties.
    """
    base_filter = []
    if current_user.role != UserRole.ADMIN:
        owned = select(Property.id).where(Property.user_id == current_user.id)
        base_filter.append(Review.property_id.in_(owned))
    if property_id is not None:
        base_filter.append(Review.property_id == property_id)
    if platform is not None:
        base_filter.append(Review.platform == platform)
    if min_rating is not None:
        base_filter.append(Review.rating >= min_rating)

    total = await db.scalar(select(func.count()).select_from(Review).where(*base_filter))

    result = await db.execute(
        select(Review).where(*base_filter).order_by(Review.created_at.desc()).offset(skip).limit(limit)
    )
    return {"items": list(result.scalars().all()), "total": total}


@router.get(
    "/properties/{property_id}/reviews/summary",
    response_model=ReviewSummaryResponse,
    summary="Average ratings for a property",
)
async def reviews_summary(
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> dict:
    return await review_service.review_summary(db, prop.id)


@router.post(
    "/properties/{property_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a review",
)
async def create_review(
    body: ReviewCreate,
    prop: Property = Depends(get_owned_property),
    db: AsyncSession = Depends(get_db),
) -> Review:
    """Record a review for the property.

    A review linked to a booking of this property is marked verified.
    """
    is_verified = False
    if body.booking_id is not None:
        booking = await db.get(Booking, body.booking_id)
        if booking is None or booking.property_id != prop.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Booking not found",
            )
        is_verified = True

    if body.guest_id is not None and await db.get(Guest, body.guest_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Guest not found",
        )

    review = Review(property_id=prop.id, is_verified=is_verified, **body.model_dump())
    db.add(review)
    await db.flush()
    await db.refresh(review)
    return review


@router.put(
    "/reviews/{review_id}/response",
    response_model=ReviewResponse,
    summary="Respond to a review",
)
async def respond(
    review_id: uuid.UUID,
    body: OwnerResponseUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Review:
    """Set the owner's public response. Only the property owner (or an admin) may respond."""
    review = await _get_review(db, review_id, owner=current_user)
    review = await review_service.respond_to_review(db, review, body.response)
    await db.refresh(review)
    return review


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review's response or publication",
)
async def update_review(
    review_id: uuid.UUID,
    body: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_property_manager),
) -> Review:
    """Change the owner response and/or hide or show the review.

    Sending ``owner_response: null`` removes the response.
    """
    review = await _get_review(db, review_id, owner=current_user)
    changes = body.model_dump(exclude_unset=True)

    if "owner_response" in changes:
        if changes["owner_response"] is None:
            review = await review_service.clear_response(db, review)
        else:
            review = await review_service.respond_to_review(db, review, changes["owner_response"])
    if "is_published" in changes:
        review = await review_service.set_published(db, review, changes["is_published"])

    await db.refresh(review)
    return review


@router.post(
    "/reviews/{review_id}/helpful",
    response_model=ReviewResponse,
    summary="Mark a review as helpful",
)
async def mark_helpful(
    review_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Review:
    review = await _get_review(db, review_id)
    return await review_service.mark_helpful(db, review)
