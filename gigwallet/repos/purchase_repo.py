"""
Credit purchase repository
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from gigwallet.models.purchase import CreditPurchase
from gigwallet.models.enums import PurchaseStatus


async def create_purchase(
    session: AsyncSession,
    user_id: UUID,
    amount_cents: int,
    payment_provider: str = "manual"
) -> CreditPurchase:
    """Create a pending purchase; credits are 1:1 with the amount paid."""
    purchase = CreditPurchase(
        user_id=user_id,
        amount_cents=amount_cents,
        credits_cents=amount_cents,
        payment_provider=payment_provider,
        status=PurchaseStatus.PENDING.value
    )
    session.add(purchase)
    await session.commit()
    await session.refresh(purchase)
    return purchase


async def get_purchase_for_update(session: AsyncSession, purchase_id: UUID) -> Optional[CreditPurchase]:
    """Lock a purchase row for update."""
    result = await session.execute(
        select(CreditPurchase)
        .where(CreditPurchase.id == purchase_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
