"""
Credit purchase model
"""

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
from gigwallet.models.enums import PurchaseStatus
import uuid


class CreditPurchase(Base):
    """Money paid in through an external provider, credited 1:1"""
    __tablename__ = "credit_purchases"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    credits_cents = Column(BigInteger, nullable=False)
    payment_provider = Column(String(64), nullable=False, default="manual")
    external_transaction_id = Column(String(128), nullable=True, unique=True)
    status = Column(String(16), nullable=False, default=PurchaseStatus.PENDING.value)
    failure_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<CreditPurchase(id={self.id}, user_id={self.user_id}, amount_cents={self.amount_cents}, status={self.status})>"
