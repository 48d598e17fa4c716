"""
Wallet model
"""

from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
import uuid


class Wallet(Base):
    """Per-user credit wallet, amounts in cents"""
    __tablename__ = "wallets"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True)
    balance_cents = Column(BigInteger, nullable=False, default=0)
    total_earned_cents = Column(BigInteger, nullable=False, default=0)
    total_spent_cents = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Constraints
    __table_args__ = (
        CheckConstraint('balance_cents >= 0', name='chk_balance_nonneg'),
        CheckConstraint('total_earned_cents >= 0', name='chk_earned_nonneg'),
        CheckConstraint('total_spent_cents >= 0', name='chk_spent_nonneg'),
    )

    def __repr__(self):
        return f"<Wallet(id={self.id}, user_id={self.user_id}, balance_cents={self.balance_cents})>"
