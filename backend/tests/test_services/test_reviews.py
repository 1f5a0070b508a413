"""Tests for review statistics and owner interactions."""

from decimal import Decimal

import pytest

from rentalops.models import Review
from rentalops.services import reviews

pytestmark = pytest.mark.asyncio


async def _review(db_session, prop, rating: str, **scores) -> Review:
    review = Review(
        property_id=prop.id,
        guest_name="Reviewer",
        rating=Decimal(rating),
        **{name: Decimal(value) for name, value in scores.items() if name != "is_published"},
        is_published=scores.get("is_published", True),
    )
    db_session.add(review)
    await db_session.flush()
    return review


class TestReviewSummary:
    async def test_no_reviews(self, db_session, test_property):
        summary = await reviews.review_summary(db_session, test_property.id)

        assert summary["total"] == 0
        assert summary["overall"] is None
        assert set(summary["categories"]) == set(reviews.REVIEW_CATEGORIES)
        assert all(value is None for value in summary["categories"].values())

    async def test_averages_round_half_up(self, db_session, test_property):
        await _review(db_session, test_property, "5.0", cleanliness="5.0")
        await _review(db_session, test_property, "4.0", cleanliness="4.0", value="3.0")
        await _review(db_session, test_property, "4.0")
        await _review(db_session, test_property, "4.5")

        summary = await reviews.review_summary(db_session, test_property.id)

        assert summary["total"] == 4
        assert summary["overall"] == Decimal("4.4")  # 4.375
        assert summary["categories"]["cleanliness"] == Decimal("4.5")
        assert summary["categories"]["value"] == Decimal("3.0")
        assert summary["categories"]["location"] is None

    async def test_unpublished_reviews_ignored(self, db_session, test_property):
        await _review(db_session, test_property, "5.0")
        await _review(db_session, test_property, "1.0", is_published=False)

        summary = await reviews.review_summary(db_session, test_property.id)

        assert summary["total"] == 1
        assert summary["overall"] == Decimal("5.0")


class TestOwnerInteractions:
    async def test_respond(self, db_session, test_property):
        review = await _review(db_session, test_property, "3.0")

        await reviews.respond_to_review(db_session, review, "Thanks, we fixed the heater.")

        assert review.owner_response == "Thanks, we fixed the heater."
        assert review.owner_response_date is not None

    async def test_mark_helpful_increments(self, db_session, test_property):
        review = await _review(db_session, test_property, "4.0")

        await reviews.mark_helpful(db_session, review)
        await reviews.mark_helpful(db_session, review)

        assert review.helpful_count == 2
