"""
Review API endpoints
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.core.auth import get_current_user
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.review import Review
from gigwallet.models.user import User
from gigwallet.repos.review_repo import get_reviews_for_user
from gigwallet.services.reviews import get_user_rating, submit_review

router = APIRouter()


class ReviewCreate(BaseModel):
    """Review of the other party of a paid gig"""
    gig_id: UUID
    rating: int = Field(..., ge=1, le=5)
    review_text: Optional[str] = Field(None, max_length=2000)


def review_to_dict(review: Review) -> dict:
    return {
        "id": str(review.id),
        "gig_id": str(review.gig_id),
        "reviewer_id": str(review.reviewer_id),
        "reviewee_id": str(review.reviewee_id),
        "rating": review.rating,
        "review_text": review.review_text,
        "created_at": review.created_at.isoformat() if review.created_at else None
    }


@router.post("/reviews", status_code=status.HTTP_201_CREATED)
async def create_review_endpoint(
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Review the other party of a gig with a completed payment.
    """
    try:
        review = await submit_review(
            session,
            reviewer_id=current_user.id,
            gig_id=review_data.gig_id,
            rating=review_data.rating,
            review_text=review_data.review_text
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return review_to_dict(review)


@router.get("/users/{user_id}/reviews")
async def list_user_reviews(
    user_id: UUID,
    limit: int = Query(50, le=200),
    offset: int = 0,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Reviews a user has received, newest first, with their average rating.
    """
    reviews = await get_reviews_for_user(session, user_id, limit=limit, offset=offset)
    rating = await get_user_rating(session, user_id)
    return {**rating, "reviews": [review_to_dict(r) for r in reviews]}
