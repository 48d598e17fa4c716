"""
Ledger entry model (credit_transactions table)
"""

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
import uuid


class LedgerEntry(Base):
    """
    Immutable audit record of one wallet mutation.

    amount_cents is signed: credits are positive, debits negative.
    balance_after_cents is the wallet balance once this entry applied.
    """
    __tablename__ = "credit_transactions"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    balance_after_cents = Column(BigInteger, nullable=False)
    description = Column(String(255), nullable=False)
    status = Column(String(16), nullable=False, default="completed")
    reference_entry_id = Column(Uuid(as_uuid=True), ForeignKey("credit_transactions.id"), nullable=True)
    gig_id = Column(Uuid(as_uuid=True), ForeignKey("gigs.id"), nullable=True)
    application_id = Column(Uuid(as_uuid=True), ForeignKey("gig_applications.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<LedgerEntry(id={self.id}, user_id={self.user_id}, type={self.type}, amount_cents={self.amount_cents})>"
