"""
Credit purchases: money paid in through an external provider.

A purchase is created pending; the provider's webhook later confirms or
fails it. Confirmation credits the wallet and writes a purchase ledger
entry in one transaction. A purchase already in a terminal state is left
alone, so provider retries are harmless.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.config import settings
from gigwallet.core.errors import (
    ConflictError,
    GigWalletError,
    NotFoundError,
    TransactionFailedError,
    ValidationError,
)
from gigwallet.models.enums import LedgerEntryType, PurchaseStatus
from gigwallet.models.purchase import CreditPurchase
from gigwallet.repos.purchase_repo import create_purchase, get_purchase_for_update
from gigwallet.services.fees import from_cents, to_cents
from gigwallet.services.ledger import lock_wallets, post_ledger_entry

# Configure logging
logger = logging.getLogger(__name__)


@dataclass
class ConfirmationResult:
    purchase: CreditPurchase
    applied: bool


async def start_purchase(
    session: AsyncSession,
    user_id: UUID,
    amount: Union[Decimal, str, int, float],
    payment_provider: str = "manual"
) -> CreditPurchase:
    """Create a pending credit purchase."""
    amount_cents = to_cents(amount)
    if amount_cents < to_cents(settings.min_purchase_amount):
        raise ValidationError(f"Minimum purchase amount is R{settings.min_purchase_amount}")

    purchase = await create_purchase(session, user_id, amount_cents, payment_provider)
    logger.info(f"Purchase {purchase.id} of {from_cents(amount_cents)} started by {user_id}")
    return purchase


async def confirm_purchase(
    session: AsyncSession,
    purchase_id: UUID,
    succeeded: bool,
    external_transaction_id: Optional[str] = None,
    failure_reason: Optional[str] = None
) -> ConfirmationResult:
    """
    Settle a pending purchase from a provider callback.

    Returns:
        ConfirmationResult; applied is False when the purchase was already
        completed or failed and nothing changed
    """
    try:
        purchase = await get_purchase_for_update(session, purchase_id)
        if purchase is None:
            raise NotFoundError("Purchase not found")

        if purchase.status != PurchaseStatus.PENDING.value:
            logger.info(f"Purchase {purchase_id} already {purchase.status}, ignoring callback")
            await session.commit()
            return ConfirmationResult(purchase=purchase, applied=False)

        if succeeded:
            wallets = await lock_wallets(session, [purchase.user_id])
            await post_ledger_entry(
                session,
                wallets[purchase.user_id],
                LedgerEntryType.PURCHASE.value,
                purchase.credits_cents,
                f"Credit purchase via {purchase.payment_provider}"
            )
            purchase.status = PurchaseStatus.COMPLETED.value
            purchase.external_transaction_id = external_transaction_id
        else:
            purchase.status = PurchaseStatus.FAILED.value
            purchase.failure_reason = failure_reason or "Payment declined by provider"
            purchase.external_transaction_id = external_transaction_id

        await session.commit()

    except GigWalletError:
        await session.rollback()
        raise

    except IntegrityError as e:
        await session.rollback()
        logger.warning(f"Purchase {purchase_id} rejected by constraint: {e}")
        raise ConflictError("External transaction already recorded")

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Purchase confirmation failed for {purchase_id}: {e}")
        raise TransactionFailedError("Purchase processing failed")

    logger.info(f"Purchase {purchase_id} {purchase.status}")
    return ConfirmationResult(purchase=purchase, applied=True)
