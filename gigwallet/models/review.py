"""
Gig review model
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, CheckConstraint, UniqueConstraint, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
import uuid


class Review(Base):
    """Rating left by one party of a paid gig for the other"""
    __tablename__ = "reviews"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    gig_id = Column(Uuid(as_uuid=True), ForeignKey("gigs.id"), nullable=False, index=True)
    reviewer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    reviewee_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint('rating BETWEEN 1 AND 5', name='chk_review_rating'),
        UniqueConstraint('reviewer_id', 'gig_id', name='uq_review_reviewer_gig'),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, gig_id={self.gig_id}, reviewee_id={self.reviewee_id}, rating={self.rating})>"
