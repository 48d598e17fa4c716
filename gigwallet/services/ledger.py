"""
Ledger posting - the only code path that changes a wallet balance.

Every balance change goes through post_ledger_entry(), which applies the
delta to a locked wallet and appends the matching ledger row in the same
session. Committing is left to the calling service.
"""

import logging
from typing import Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.models.ledger_entry import LedgerEntry
from gigwallet.models.wallet import Wallet
from gigwallet.repos.ledger_repo import add_ledger_entry
from gigwallet.repos.wallet_repo import apply_balance_delta, lock_wallet_for_user

# Configure logging
logger = logging.getLogger(__name__)


async def lock_wallets(session: AsyncSession, user_ids: Iterable[UUID]) -> Dict[UUID, Wallet]:
    """
    Lock several wallets, always in user id order.

    A fixed lock order keeps two opposite-direction payments between the
    same pair of users from deadlocking.
    """
    wallets = {}
    for user_id in sorted(set(user_ids), key=str):
        wallets[user_id] = await lock_wallet_for_user(session, user_id)
    return wallets


async def post_ledger_entry(
    session: AsyncSession,
    wallet: Wallet,
    entry_type: str,
    amount_cents: int,
    description: str,
    earned_cents: int = 0,
    spent_cents: int = 0,
    reference_entry_id: Optional[UUID] = None,
    gig_id: Optional[UUID] = None,
    application_id: Optional[UUID] = None
) -> LedgerEntry:
    """
    Apply a signed amount to a locked wallet and record it.

    Raises:
        InsufficientFundsError: if a debit exceeds the balance; nothing is
            written in that case
    """
    balance_after = apply_balance_delta(
        wallet,
        amount_cents,
        earned_cents=earned_cents,
        spent_cents=spent_cents
    )

    entry = await add_ledger_entry(
        session,
        user_id=wallet.user_id,
        entry_type=entry_type,
        amount_cents=amount_cents,
        balance_after_cents=balance_after,
        description=description,
        reference_entry_id=reference_entry_id,
        gig_id=gig_id,
        application_id=application_id
    )

    logger.debug(f"Posted {entry_type} {amount_cents} for user {wallet.user_id}, balance now {balance_after}")
    return entry
