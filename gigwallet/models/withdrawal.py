"""
Withdrawal request model
"""

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey, Text, CheckConstraint, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
from gigwallet.models.enums import WithdrawStatus
import uuid


class Withdrawal(Base):
    """Withdrawal request - wallet is only debited when fulfilled"""
    __tablename__ = "withdrawal_requests"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    withdrawal_fee_cents = Column(BigInteger, nullable=False)
    net_amount_cents = Column(BigInteger, nullable=False)
    payment_method_id = Column(Uuid(as_uuid=True), ForeignKey("payment_methods.id"), nullable=True)
    payout_reference = Column(String(256), nullable=False)
    status = Column(String(16), nullable=False, default=WithdrawStatus.PENDING.value)
    processing_notes = Column(Text, nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            'amount_cents = withdrawal_fee_cents + net_amount_cents',
            name='chk_withdrawal_conservation'
        ),
    )

    def __repr__(self):
        return f"<Withdrawal(id={self.id}, user_id={self.user_id}, amount_cents={self.amount_cents}, status={self.status})>"
