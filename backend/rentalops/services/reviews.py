"""Review service — rating summaries and owner interactions."""

import logging
import uuid
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentalops.models.review import REVIEW_CATEGORIES, Review

logger = logging.getLogger(__name__)

ONE_PLACE = Decimal("0.1")


def _round(value: Decimal | float | None) -> Decimal | None:
    if value is None:
        return None
    return Decimal(value).quantize(ONE_PLACE, rounding=ROUND_HALF_UP)


async def review_summary(db: AsyncSession, property_id: uuid.UUID) -> dict:
    """Count and averages over the property's published reviews.

    Category averages only consider reviews that rated that category; a
    category nobody rated is ``None``.
    """
    columns = [func.count(Review.id), func.avg(Review.rating)]
    columns += [func.avg(getattr(Review, name)) for name in REVIEW_CATEGORIES]

    result = await db.execute(
        select(*columns).where(Review.property_id == property_id, Review.is_published.is_(True))
    )
    row = result.one()
    total, overall, *categories = row

    return {
        "total": total,
        "overall": _round(overall),
        "categories": {name: _round(avg) for name, avg in zip(REVIEW_CATEGORIES, categories)},
    }


async def respond_to_review(db: AsyncSession, review: Review, response: str) -> Review:
    review.owner_response = response
    review.owner_response_date = datetime.now(timezone.utc)
    await db.flush()
    logger.info("Owner responded to review %s", review.id)
    return review


async def set_published(db: AsyncSession, review: Review, published: bool) -> Review:
    """Show or hide a review. Unpublished reviews are left out of the summary."""
    review.is_published = published
    await db.flush()
    logger.info("Review %s %s", review.id, "published" if published else "unpublished")
    return review


async def clear_response(db: AsyncSession, review: Review) -> Review:
    review.owner_response = None
    review.owner_response_date = None
    await db.flush()
    return review


async def mark_helpful(db: AsyncSession, review: Review) -> Review:
    review.helpful_count = Review.helpful_count + 1
    await db.flush()
    await db.refresh(review)
    return review
