"""
Wallet repository with row-locked balance operations

Balance-changing helpers here flush but never commit: the caller owns the
transaction so that the wallet update, its ledger entry and any related
records land in one atomic unit.
"""

from typing import Optional
from uuid import UUID
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from gigwallet.core.errors import InsufficientFundsError
from gigwallet.models.wallet import Wallet

# Configure logging
logger = logging.getLogger(__name__)


async def get_wallet_for_user(session: AsyncSession, user_id: UUID) -> Optional[Wallet]:
    """
    Get wallet for a specific user.

    Args:
        session: Database session
        user_id: User UUID

    Returns:
        Wallet instance or None if not found
    """
    result = await session.execute(
        select(Wallet).where(Wallet.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_wallet_for_user(session: AsyncSession, user_id: UUID) -> Wallet:
    """
    Create a new wallet for a user and commit it.

    Returns:
        Created Wallet instance or existing wallet if one already exists
    """
    existing_wallet = await get_wallet_for_user(session, user_id)
    if existing_wallet:
        return existing_wallet

    wallet = Wallet(
        user_id=user_id,
        balance_cents=0,
        total_earned_cents=0,
        total_spent_cents=0
    )
    session.add(wallet)
    await session.commit()
    await session.refresh(wallet)
    return wallet


async def lock_wallet_for_user(session: AsyncSession, user_id: UUID) -> Wallet:
    """
    Lock a user's wallet row for update, creating the wallet if it is missing.

    A freshly created wallet is flushed inside the caller's transaction. Two
    requests racing to create the same wallet are settled by the unique
    constraint on wallets.user_id.
    """
    result = await session.execute(
        select(Wallet)
        .where(Wallet.user_id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    wallet = result.scalar_one_or_none()

    if wallet is None:
        wallet = Wallet(
            user_id=user_id,
            balance_cents=0,
            total_earned_cents=0,
            total_spent_cents=0
        )
        session.add(wallet)
        await session.flush()
        logger.info(f"Created wallet for user {user_id}")

    return wallet


def apply_balance_delta(
    wallet: Wallet,
    delta_cents: int,
    earned_cents: int = 0,
    spent_cents: int = 0
) -> int:
    """
    Apply a signed delta to a locked wallet.

    Args:
        wallet: Wallet locked by lock_wallet_for_user
        delta_cents: Change to balance (negative for debits)
        earned_cents: Amount to add to total_earned
        spent_cents: Amount to add to total_spent

    Returns:
        New balance in cents

    Raises:
        InsufficientFundsError: if the debit would take the balance below zero
    """
    new_balance = wallet.balance_cents + delta_cents
    if new_balance < 0:
        raise InsufficientFundsError("Insufficient credits. Please add credits to your wallet.")

    wallet.balance_cents = new_balance
    wallet.total_earned_cents += earned_cents
    wallet.total_spent_cents += spent_cents
    return new_balance
