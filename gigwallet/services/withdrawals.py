"""
Withdrawal requests and their fulfilment.

Creating a request only records it as pending; the wallet is untouched.
An admin approval moves it to approved and queues fulfilment, which debits
the wallet and writes the withdrawal ledger entry in one transaction. If the
balance no longer covers the request at that point it is marked failed
instead.

    pending -> approved -> completed | failed
    pending -> rejected
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.config import settings
from gigwallet.core.errors import (
    GigWalletError,
    InsufficientFundsError,
    NotFoundError,
    TransactionFailedError,
    ValidationError,
)
from gigwallet.models.enums import LedgerEntryType, WithdrawStatus
from gigwallet.models.withdrawal import Withdrawal
from gigwallet.repos.audit_log_repo import add_audit_log
from gigwallet.repos.wallet_repo import get_wallet_for_user
from gigwallet.repos.withdrawal_repo import create_withdrawal, get_withdrawal_for_update
from gigwallet.services.fees import calculate_withdrawal_fee, from_cents, to_cents
from gigwallet.services.ledger import lock_wallets, post_ledger_entry
from gigwallet.services.payment_methods import get_verified_method, payout_label

# Configure logging
logger = logging.getLogger(__name__)


async def request_withdrawal(
    session: AsyncSession,
    user_id: UUID,
    amount: Union[Decimal, str, int, float],
    payment_method_id: Optional[UUID]
) -> Withdrawal:
    """
    Record a pending withdrawal request to one of the user's verified
    payment methods.

    Raises:
        ValidationError: amount below the minimum, or no verified payment method
        NotFoundError: unknown payment method
        AuthorizationError: payment method belongs to another user
        InsufficientFundsError: amount exceeds the current balance
    """
    amount_cents = to_cents(amount)
    if amount_cents < to_cents(settings.min_withdrawal_amount):
        raise ValidationError(f"Minimum withdrawal amount is R{settings.min_withdrawal_amount}")
    method = await get_verified_method(session, user_id, payment_method_id)

    wallet = await get_wallet_for_user(session, user_id)
    balance_cents = wallet.balance_cents if wallet else 0
    if amount_cents > balance_cents:
        raise InsufficientFundsError("Withdrawal amount exceeds your current balance")

    fees = calculate_withdrawal_fee(amount_cents)
    withdrawal = await create_withdrawal(
        session,
        user_id=user_id,
        amount_cents=fees.gross_cents,
        withdrawal_fee_cents=fees.fee_cents,
        net_amount_cents=fees.net_cents,
        payment_method_id=method.id,
        payout_reference=payout_label(method)
    )

    logger.info(
        f"Withdrawal {withdrawal.id} requested by {user_id}: amount {from_cents(fees.gross_cents)}, "
        f"fee {from_cents(fees.fee_cents)}, net {from_cents(fees.net_cents)}"
    )
    return withdrawal


async def _load_pending(session: AsyncSession, withdrawal_id: UUID) -> Withdrawal:
    withdrawal = await get_withdrawal_for_update(session, withdrawal_id)
    if withdrawal is None:
        raise NotFoundError("Withdrawal not found")
    if withdrawal.status != WithdrawStatus.PENDING.value:
        raise ValidationError(f"Withdrawal is already {withdrawal.status}")
    return withdrawal


async def approve_withdrawal(session: AsyncSession, withdrawal_id: UUID, admin_id: UUID) -> Withdrawal:
    """
    Move a pending withdrawal to approved. The caller queues fulfilment
    afterwards; no money moves here.
    """
    withdrawal = await _load_pending(session, withdrawal_id)
    withdrawal.status = WithdrawStatus.APPROVED.value
    add_audit_log(
        session,
        admin_id=admin_id,
        action="approve_withdrawal",
        resource_type="withdrawal",
        resource_id=withdrawal_id,
        details={"amount_cents": withdrawal.amount_cents}
    )
    await session.commit()
    logger.info(f"Withdrawal {withdrawal_id} approved by {admin_id}")
    return withdrawal


async def reject_withdrawal(
    session: AsyncSession,
    withdrawal_id: UUID,
    admin_id: UUID,
    notes: Optional[str] = None
) -> Withdrawal:
    """Reject a pending request; no balance change."""
    withdrawal = await _load_pending(session, withdrawal_id)
    withdrawal.status = WithdrawStatus.REJECTED.value
    withdrawal.processing_notes = notes
    withdrawal.processed_at = datetime.now(timezone.utc)
    add_audit_log(
        session,
        admin_id=admin_id,
        action="reject_withdrawal",
        resource_type="withdrawal",
        resource_id=withdrawal_id,
        details={"notes": notes}
    )
    await session.commit()
    logger.info(f"Withdrawal {withdrawal_id} rejected by {admin_id}")
    return withdrawal


async def fulfil_withdrawal(session: AsyncSession, withdrawal_id: UUID) -> Withdrawal:
    """
    Debit the wallet for an approved withdrawal.

    Safe to run more than once: a withdrawal that is not approved is
    returned unchanged.
    """
    try:
        withdrawal = await get_withdrawal_for_update(session, withdrawal_id)
        if withdrawal is None:
            raise NotFoundError("Withdrawal not found")

        if withdrawal.status != WithdrawStatus.APPROVED.value:
            logger.info(f"Withdrawal {withdrawal_id} is {withdrawal.status}, nothing to fulfil")
            await session.commit()
            return withdrawal

        wallets = await lock_wallets(session, [withdrawal.user_id])
        try:
            await post_ledger_entry(
                session,
                wallets[withdrawal.user_id],
                LedgerEntryType.WITHDRAWAL.value,
                -withdrawal.amount_cents,
                f"Withdrawal to {withdrawal.payout_reference} "
                f"(fee R{from_cents(withdrawal.withdrawal_fee_cents)}, "
                f"payout R{from_cents(withdrawal.net_amount_cents)})"
            )
            withdrawal.status = WithdrawStatus.COMPLETED.value
        except InsufficientFundsError:
            withdrawal.status = WithdrawStatus.FAILED.value
            withdrawal.processing_notes = "Insufficient balance at fulfilment"

        withdrawal.processed_at = datetime.now(timezone.utc)
        await session.commit()

    except GigWalletError:
        await session.rollback()
        raise

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Withdrawal fulfilment failed for {withdrawal_id}: {e}")
        raise TransactionFailedError("Withdrawal processing failed")

    logger.info(f"Withdrawal {withdrawal_id} {withdrawal.status}")
    return withdrawal
