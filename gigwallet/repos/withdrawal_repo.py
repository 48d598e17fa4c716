"""
Withdrawal request repository
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from gigwallet.models.withdrawal import Withdrawal
from gigwallet.models.enums import WithdrawStatus


async def create_withdrawal(
    session: AsyncSession,
    user_id: UUID,
    amount_cents: int,
    withdrawal_fee_cents: int,
    net_amount_cents: int,
    payment_method_id: UUID,
    payout_reference: str
) -> Withdrawal:
    """Create a pending withdrawal request"""
    withdrawal = Withdrawal(
        user_id=user_id,
        amount_cents=amount_cents,
        withdrawal_fee_cents=withdrawal_fee_cents,
        net_amount_cents=net_amount_cents,
        payment_method_id=payment_method_id,
        payout_reference=payout_reference,
        status=WithdrawStatus.PENDING.value
    )
    session.add(withdrawal)
    await session.commit()
    await session.refresh(withdrawal)
    return withdrawal


async def get_withdrawal(session: AsyncSession, withdrawal_id: UUID) -> Optional[Withdrawal]:
    """Get a withdrawal by ID"""
    result = await session.execute(select(Withdrawal).where(Withdrawal.id == withdrawal_id))
    return result.scalar_one_or_none()


async def get_withdrawal_for_update(session: AsyncSession, withdrawal_id: UUID) -> Optional[Withdrawal]:
    """Lock a withdrawal row for update"""
    result = await session.execute(
        select(Withdrawal)
        .where(Withdrawal.id == withdrawal_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_withdrawals_by_user(session: AsyncSession, user_id: UUID) -> List[Withdrawal]:
    """Get a user's withdrawal requests, newest first"""
    result = await session.execute(
        select(Withdrawal)
        .where(Withdrawal.user_id == user_id)
        .order_by(desc(Withdrawal.created_at))
    )
    return result.scalars().all()


async def get_withdrawals_by_status(session: AsyncSession, status: str, limit: int = 50) -> List[Withdrawal]:
    """Get withdrawal requests in one status, oldest first"""
    result = await session.execute(
        select(Withdrawal)
        .where(Withdrawal.status == status)
        .order_by(Withdrawal.created_at)
        .limit(limit)
    )
    return result.scalars().all()
