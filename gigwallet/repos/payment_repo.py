"""
Gig payment repository
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, or_
from gigwallet.models.payment import GigPayment
from gigwallet.models.enums import PaymentStatus


async def get_payment_for_application(session: AsyncSession, application_id: UUID) -> Optional[GigPayment]:
    """Get the payment recorded for an application, if any."""
    result = await session.execute(
        select(GigPayment).where(GigPayment.application_id == application_id)
    )
    return result.scalar_one_or_none()


async def create_gig_payment(
    session: AsyncSession,
    application_id: UUID,
    gig_id: UUID,
    payer_id: UUID,
    payee_id: UUID,
    gross_amount_cents: int,
    service_fee_cents: int,
    net_amount_cents: int
) -> GigPayment:
    """
    Insert a pending payment record and flush it.

    The flush is what surfaces a duplicate application_id as an
    IntegrityError before any wallet is touched.
    """
    payment = GigPayment(
        application_id=application_id,
        gig_id=gig_id,
        payer_id=payer_id,
        payee_id=payee_id,
        gross_amount_cents=gross_amount_cents,
        service_fee_cents=service_fee_cents,
        net_amount_cents=net_amount_cents,
        payment_status=PaymentStatus.PENDING.value
    )
    session.add(payment)
    await session.flush()
    return payment


async def get_payments_for_user(
    session: AsyncSession,
    user_id: UUID,
    limit: int = 50,
    offset: int = 0
) -> List[GigPayment]:
    """Get payments where the user is payer or payee, newest first."""
    result = await session.execute(
        select(GigPayment)
        .where(or_(GigPayment.payer_id == user_id, GigPayment.payee_id == user_id))
        .order_by(desc(GigPayment.created_at))
        .limit(limit)
        .offset(offset)
    )
    return result.scalars().all()


async def get_completed_payment_for_gig(
    session: AsyncSession,
    gig_id: UUID,
    user_id: UUID
) -> Optional[GigPayment]:
    """Get a completed payment on a gig where the user is payer or payee."""
    result = await session.execute(
        select(GigPayment)
        .where(
            GigPayment.gig_id == gig_id,
            GigPayment.payment_status == PaymentStatus.COMPLETED.value,
            or_(GigPayment.payer_id == user_id, GigPayment.payee_id == user_id)
        )
        .limit(1)
    )
    return result.scalar_one_or_none()
