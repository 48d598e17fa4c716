"""
Gig and gig application models
"""

from sqlalchemy import (
    Column, String, Text, BigInteger, Boolean, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, Uuid
)
from sqlalchemy.sql import func
from gigwallet.db.base import Base
from gigwallet.models.enums import GigStatus, ApplicationStatus
import uuid


class Gig(Base):
    """Gig model - a short-term job posted by a user"""
    __tablename__ = "gigs"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    poster_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(32), nullable=False)
    location = Column(String(200), nullable=False)
    budget_min_cents = Column(BigInteger, nullable=True)
    budget_max_cents = Column(BigInteger, nullable=True)
    is_urgent = Column(Boolean, nullable=False, default=False)
    status = Column(String(16), nullable=False, default=GigStatus.OPEN.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            'budget_min_cents IS NULL OR budget_max_cents IS NULL OR budget_min_cents <= budget_max_cents',
            name='chk_gig_budget_range'
        ),
    )

    def __repr__(self):
        return f"<Gig(id={self.id}, title={self.title}, status={self.status})>"


class GigApplication(Base):
    """A worker's bid on a gig"""
    __tablename__ = "gig_applications"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    gig_id = Column(Uuid(as_uuid=True), ForeignKey("gigs.id"), nullable=False, index=True)
    worker_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=True)
    proposed_rate_cents = Column(BigInteger, nullable=True)
    status = Column(String(16), nullable=False, default=ApplicationStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('gig_id', 'worker_id', name='uq_application_gig_worker'),
    )

    def __repr__(self):
        return f"<GigApplication(id={self.id}, gig_id={self.gig_id}, worker_id={self.worker_id}, status={self.status})>"
