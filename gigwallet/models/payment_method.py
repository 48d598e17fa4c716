"""
Saved payout and payment method model
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
import uuid


class PaymentMethod(Base):
    """
    A user's bank account, card or PayPal address.

    Only display details are kept: the last four card digits and brand, never
    the full card number. Withdrawals may only pay out to a verified method.
    """
    __tablename__ = "payment_methods"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    provider = Column(String(64), nullable=True)
    bank_name = Column(String(128), nullable=True)
    account_holder_name = Column(String(128), nullable=True)
    account_number = Column(String(32), nullable=True)
    branch_code = Column(String(16), nullable=True)
    account_type = Column(String(16), nullable=True)
    card_last_four = Column(String(4), nullable=True)
    card_brand = Column(String(32), nullable=True)
    paypal_email = Column(String(255), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<PaymentMethod(id={self.id}, user_id={self.user_id}, type={self.type}, verified={self.is_verified})>"
