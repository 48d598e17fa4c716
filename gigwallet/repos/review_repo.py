"""
Review repository
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, func
from gigwallet.models.review import Review


async def create_review(
    session: AsyncSession,
    gig_id: UUID,
    reviewer_id: UUID,
    reviewee_id: UUID,
    rating: int,
    review_text: Optional[str]
) -> Review:
    """Insert a review and flush; a second review of the same gig fails the unique constraint."""
    review = Review(
        gig_id=gig_id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        rating=rating,
        review_text=review_text
    )
    session.add(review)
    await session.flush()
    return review


async def get_reviews_for_user(
    session: AsyncSession,
    reviewee_id: UUID,
    limit: int = 50,
    offset: int = 0
) -> List[Review]:
    """Get reviews received by a user, newest first"""
    result = await session.execute(
        select(Review)
        .where(Review.reviewee_id == reviewee_id)
        .order_by(desc(Review.created_at))
        .limit(limit)
        .offset(offset)
    )
    return result.scalars().all()


async def get_rating_summary(session: AsyncSession, reviewee_id: UUID) -> Tuple[Optional[float], int]:
    """Average rating and number of reviews received by a user"""
    result = await session.execute(
        select(func.avg(Review.rating), func.count(Review.id))
        .where(Review.reviewee_id == reviewee_id)
    )
    average, count = result.one()
    return (float(average) if average is not None else None), count
