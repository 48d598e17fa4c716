"""
Gig payment model
"""

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
from gigwallet.models.enums import PaymentStatus
import uuid


class GigPayment(Base):
    """One payment per accepted application; application_id is unique"""
    __tablename__ = "gig_payments"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    application_id = Column(
        Uuid(as_uuid=True), ForeignKey("gig_applications.id"), nullable=False
    )
    gig_id = Column(Uuid(as_uuid=True), ForeignKey("gigs.id"), nullable=False)
    payer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    payee_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    gross_amount_cents = Column(BigInteger, nullable=False)
    service_fee_cents = Column(BigInteger, nullable=False)
    net_amount_cents = Column(BigInteger, nullable=False)
    payment_status = Column(String(16), nullable=False, default=PaymentStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("application_id", name="uq_payment_application"),
        CheckConstraint('gross_amount_cents > 0', name='chk_payment_gross_pos'),
        CheckConstraint(
            'gross_amount_cents = service_fee_cents + net_amount_cents',
            name='chk_payment_conservation'
        ),
    )

    def __repr__(self):
        return f"<GigPayment(id={self.id}, application_id={self.application_id}, gross={self.gross_amount_cents}, status={self.payment_status})>"
