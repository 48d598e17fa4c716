"""
Ledger entry repository - entries are append-only
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from gigwallet.models.ledger_entry import LedgerEntry


async def add_ledger_entry(
    session: AsyncSession,
    user_id: UUID,
    entry_type: str,
    amount_cents: int,
    balance_after_cents: int,
    description: str,
    reference_entry_id: Optional[UUID] = None,
    gig_id: Optional[UUID] = None,
    application_id: Optional[UUID] = None
) -> LedgerEntry:
    """
    Append a ledger entry inside the caller's transaction.

    Args:
        session: Database session
        user_id: Wallet owner
        entry_type: purchase, gig_payment, service_fee or withdrawal
        amount_cents: Signed amount (credits positive, debits negative)
        balance_after_cents: Wallet balance after this entry
        description: Human readable description
        reference_entry_id: Entry this one is paired with (fee entries)
        gig_id: Originating gig (optional)
        application_id: Originating application (optional)

    Returns:
        Flushed LedgerEntry instance
    """
    entry = LedgerEntry(
        user_id=user_id,
        type=entry_type,
        amount_cents=amount_cents,
        balance_after_cents=balance_after_cents,
        description=description,
        reference_entry_id=reference_entry_id,
        gig_id=gig_id,
        application_id=application_id
    )
    session.add(entry)
    await session.flush()
    return entry


async def get_ledger_entries_for_user(
    session: AsyncSession,
    user_id: UUID,
    limit: int = 100,
    offset: int = 0
) -> List[LedgerEntry]:
    """Get ledger entries for a user, newest first."""
    result = await session.execute(
        select(LedgerEntry)
        .where(LedgerEntry.user_id == user_id)
        .order_by(desc(LedgerEntry.created_at))
        .limit(limit)
        .offset(offset)
    )
    return result.scalars().all()


async def get_ledger_entries_for_application(
    session: AsyncSession,
    application_id: UUID
) -> List[LedgerEntry]:
    """Get every ledger entry written for an application's payment."""
    result = await session.execute(
        select(LedgerEntry).where(LedgerEntry.application_id == application_id)
    )
    return result.scalars().all()
