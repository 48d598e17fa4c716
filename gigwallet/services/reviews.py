"""
Reviews between the two parties of a paid gig.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.errors import AuthorizationError, ConflictError, ValidationError
from gigwallet.models.review import Review
from gigwallet.repos.payment_repo import get_completed_payment_for_gig
from gigwallet.repos.review_repo import create_review, get_rating_summary

# Configure logging
logger = logging.getLogger(__name__)

MAX_REVIEW_LENGTH = 2000


async def submit_review(
    session: AsyncSession,
    reviewer_id: UUID,
    gig_id: UUID,
    rating: int,
    review_text: Optional[str] = None
) -> Review:
    """
    Rate the other party of a gig once it has been paid.

    The reviewee is whoever was on the other side of the completed payment.

    Raises:
        ValidationError: rating outside 1..5 or text too long
        AuthorizationError: no completed payment on the gig involves the reviewer
        ConflictError: the reviewer already reviewed this gig
    """
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")
    text = review_text.strip() if review_text else None
    if text and len(text) > MAX_REVIEW_LENGTH:
        raise ValidationError(f"Review text cannot exceed {MAX_REVIEW_LENGTH} characters")

    payment = await get_completed_payment_for_gig(session, gig_id, reviewer_id)
    if payment is None:
        raise AuthorizationError("You can only review gigs you were paid for or paid on")
    reviewee_id = payment.payee_id if payment.payer_id == reviewer_id else payment.payer_id

    try:
        review = await create_review(
            session,
            gig_id=gig_id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            rating=rating,
            review_text=text or None
        )
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("You have already reviewed this gig")

    logger.info(f"Review {review.id} of {reviewee_id} left by {reviewer_id} for gig {gig_id}")
    return review


async def get_user_rating(session: AsyncSession, user_id: UUID) -> dict:
    """Average rating rounded to one decimal, and the review count."""
    average, count = await get_rating_summary(session, user_id)
    return {
        "average_rating": round(average, 1) if average is not None else None,
        "review_count": count
    }
