"""
SA ID verification repository
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from gigwallet.models.verification import SAIDVerification


async def get_verification_for_user(session: AsyncSession, user_id: UUID) -> Optional[SAIDVerification]:
    """Get the SA ID verification record for a user."""
    result = await session.execute(
        select(SAIDVerification).where(SAIDVerification.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_verification_by_id(session: AsyncSession, verification_id: UUID) -> Optional[SAIDVerification]:
    """Get a verification record by ID."""
    result = await session.execute(
        select(SAIDVerification).where(SAIDVerification.id == verification_id)
    )
    return result.scalar_one_or_none()


async def get_verifications_by_status(
    session: AsyncSession,
    verification_status: str,
    limit: int = 50
) -> List[SAIDVerification]:
    """Get verification records in one status, oldest first."""
    result = await session.execute(
        select(SAIDVerification)
        .where(SAIDVerification.verification_status == verification_status)
        .order_by(SAIDVerification.created_at)
        .limit(limit)
    )
    return result.scalars().all()
