"""
Payment method repository
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, update
from gigwallet.models.payment_method import PaymentMethod


async def add_payment_method(session: AsyncSession, user_id: UUID, **fields) -> PaymentMethod:
    """Insert an unverified payment method and commit."""
    if fields.get("is_default"):
        # Only one default per user
        await session.execute(
            update(PaymentMethod)
            .where(PaymentMethod.user_id == user_id)
            .values(is_default=False)
        )
    method = PaymentMethod(user_id=user_id, is_verified=False, **fields)
    session.add(method)
    await session.commit()
    await session.refresh(method)
    return method


async def get_payment_method(session: AsyncSession, method_id: UUID) -> Optional[PaymentMethod]:
    """Get a payment method by ID"""
    result = await session.execute(select(PaymentMethod).where(PaymentMethod.id == method_id))
    return result.scalar_one_or_none()


async def get_payment_methods_for_user(session: AsyncSession, user_id: UUID) -> List[PaymentMethod]:
    """Get a user's payment methods, default first then newest"""
    result = await session.execute(
        select(PaymentMethod)
        .where(PaymentMethod.user_id == user_id)
        .order_by(desc(PaymentMethod.is_default), desc(PaymentMethod.created_at))
    )
    return result.scalars().all()


async def get_unverified_payment_methods(session: AsyncSession, limit: int = 50) -> List[PaymentMethod]:
    """Get payment methods waiting for verification, oldest first"""
    result = await session.execute(
        select(PaymentMethod)
        .where(PaymentMethod.is_verified.is_(False))
        .order_by(PaymentMethod.created_at)
        .limit(limit)
    )
    return result.scalars().all()
