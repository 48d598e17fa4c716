"""
Gig payment processing.

A poster pays the worker of an accepted application from their credit
wallet. The platform keeps a service fee; the worker receives the rest.

Steps, in order:
    1. validate the amount
    2. load the application and its gig, check the caller is the poster
    3. check the application is accepted and not yet paid
    4. inside one transaction: insert the payment record, lock both wallets,
       debit the payer, credit the payee, post the fee, commit

The unique constraint on gig_payments.application_id is the authoritative
guard against paying twice; the existence check in step 3 only gives a
friendlier error in the common case.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Union
from uuid import UUID

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.config import settings
from gigwallet.core.errors import (
    AuthorizationError,
    ConflictError,
    GigWalletError,
    TransactionFailedError,
    ValidationError,
)
from gigwallet.models.enums import (
    ApplicationStatus,
    GigStatus,
    LedgerEntryType,
    PaymentStatus,
)
from gigwallet.models.payment import GigPayment
from gigwallet.repos.gig_repo import get_application_with_gig
from gigwallet.repos.payment_repo import create_gig_payment, get_payment_for_application
from gigwallet.services.fees import FeeBreakdown, calculate_service_fee, from_cents, to_cents
from gigwallet.services.ledger import lock_wallets, post_ledger_entry

# Configure logging
logger = logging.getLogger(__name__)

# Allowed payment status transitions; completed and failed are terminal
PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING.value: {PaymentStatus.COMPLETED.value, PaymentStatus.FAILED.value},
    PaymentStatus.COMPLETED.value: set(),
    PaymentStatus.FAILED.value: set(),
}


@dataclass
class PaymentResult:
    """Outcome of a successful gig payment"""
    payment_id: UUID
    application_id: UUID
    gross_amount: Decimal
    service_fee: Decimal
    net_amount: Decimal

    def to_response(self) -> dict:
        return {
            "success": True,
            "message": "Payment processed successfully",
            "grossAmount": float(self.gross_amount),
            "serviceFee": float(self.service_fee),
            "netAmount": float(self.net_amount),
        }


def set_payment_status(payment: GigPayment, new_status: str) -> None:
    """Move a payment to new_status, refusing to leave a terminal state."""
    allowed = PAYMENT_TRANSITIONS.get(payment.payment_status, set())
    if new_status not in allowed:
        raise ValidationError(
            f"Cannot move payment from {payment.payment_status} to {new_status}"
        )
    payment.payment_status = new_status


def parse_payment_amount(amount: Union[Decimal, str, int, float, None]) -> int:
    """Turn a caller-supplied amount into positive cents."""
    if amount is None or amount == "":
        raise ValidationError("Missing required fields: applicationId and amount")
    if isinstance(amount, bool):
        raise ValidationError("Invalid payment amount")

    gross_cents = to_cents(amount)
    if gross_cents <= 0 or gross_cents > to_cents(settings.max_payment_amount):
        raise ValidationError("Invalid payment amount")
    return gross_cents


async def process_gig_payment(
    session: AsyncSession,
    caller_id: UUID,
    application_id: UUID,
    amount: Union[Decimal, str, int, float]
) -> PaymentResult:
    """
    Pay the worker of an accepted application.

    Args:
        session: Database session (must have no open write transaction)
        caller_id: Authenticated user making the payment
        application_id: Application being paid
        amount: Gross amount in currency units; any positive agreed amount

    Returns:
        PaymentResult with the gross, fee and net amounts

    Raises:
        ValidationError: bad amount, unknown or non-accepted application
        AuthorizationError: caller is not the gig's poster
        ConflictError: the application has already been paid
        InsufficientFundsError: payer balance does not cover the gross amount
        TransactionFailedError: the database rejected the mutation; nothing
            was written and the request may be retried
    """
    gross_cents = parse_payment_amount(amount)

    logger.info(f"Processing payment for application {application_id}, amount {from_cents(gross_cents)}")

    found = await get_application_with_gig(session, application_id)
    if found is None:
        raise ValidationError("Application not found or not accepted")
    application, gig = found

    if gig.poster_id != caller_id:
        logger.warning(f"User {caller_id} tried to pay application {application_id} on gig {gig.id} they do not own")
        raise AuthorizationError("Only the gig poster can process payment")

    if application.status != ApplicationStatus.ACCEPTED.value:
        raise ValidationError("Application not found or not accepted")

    existing_payment = await get_payment_for_application(session, application_id)
    if existing_payment is not None:
        raise ConflictError("Payment already processed for this application")

    fees = calculate_service_fee(gross_cents)

    # Plain values so nothing touches expired ORM state after a rollback
    gig_id = gig.id
    gig_title = gig.title
    payee_id = application.worker_id

    try:
        payment = await _apply_payment(
            session, application_id, gig_id, gig_title, caller_id, payee_id, fees
        )
        gig.status = GigStatus.COMPLETED.value
        await session.commit()

    except GigWalletError:
        await session.rollback()
        raise

    except IntegrityError as e:
        await session.rollback()
        if _is_duplicate_payment(e):
            logger.warning(f"Duplicate payment rejected by constraint for application {application_id}")
            raise ConflictError("Payment already processed for this application")
        logger.error(f"Integrity error processing payment for application {application_id}: {e}")
        raise TransactionFailedError("Payment processing failed")

    except DataError as e:
        await session.rollback()
        logger.warning(f"Payment values rejected by the database for application {application_id}: {e}")
        raise ValidationError("Invalid payment amount")

    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Payment transaction failed for application {application_id}: {e}")
        raise TransactionFailedError("Payment processing failed")

    logger.info(
        f"Payment {payment.id} completed: gross {from_cents(fees.gross_cents)}, "
        f"fee {from_cents(fees.fee_cents)}, net {from_cents(fees.net_cents)} "
        f"from {caller_id} to {payee_id}"
    )

    return PaymentResult(
        payment_id=payment.id,
        application_id=application_id,
        gross_amount=from_cents(fees.gross_cents),
        service_fee=from_cents(fees.fee_cents),
        net_amount=from_cents(fees.net_cents),
    )


async def _apply_payment(
    session: AsyncSession,
    application_id: UUID,
    gig_id: UUID,
    gig_title: str,
    payer_id: UUID,
    payee_id: UUID,
    fees: FeeBreakdown
) -> GigPayment:
    """
    All writes of a payment; runs inside the caller's transaction.

    The payment row goes in first so a concurrent duplicate fails on the
    unique constraint before any wallet is touched.
    """
    payment = await create_gig_payment(
        session,
        application_id=application_id,
        gig_id=gig_id,
        payer_id=payer_id,
        payee_id=payee_id,
        gross_amount_cents=fees.gross_cents,
        service_fee_cents=fees.fee_cents,
        net_amount_cents=fees.net_cents
    )

    wallets = await lock_wallets(session, [payer_id, payee_id])
    payer_wallet = wallets[payer_id]
    payee_wallet = wallets[payee_id]

    await post_ledger_entry(
        session,
        payer_wallet,
        LedgerEntryType.GIG_PAYMENT.value,
        -fees.gross_cents,
        f"Payment for gig: {gig_title}",
        spent_cents=fees.gross_cents,
        gig_id=gig_id,
        application_id=application_id
    )

    credit_entry = await post_ledger_entry(
        session,
        payee_wallet,
        LedgerEntryType.GIG_PAYMENT.value,
        fees.gross_cents,
        f"Payment received for gig: {gig_title}",
        earned_cents=fees.net_cents,
        gig_id=gig_id,
        application_id=application_id
    )

    if fees.fee_cents > 0:
        await post_ledger_entry(
            session,
            payee_wallet,
            LedgerEntryType.SERVICE_FEE.value,
            -fees.fee_cents,
            f"Service fee for gig: {gig_title}",
            reference_entry_id=credit_entry.id,
            gig_id=gig_id,
            application_id=application_id
        )

    set_payment_status(payment, PaymentStatus.COMPLETED.value)
    await session.flush()
    return payment


def _is_duplicate_payment(error: IntegrityError) -> bool:
    """True when the violated constraint is the one-payment-per-application guard"""
    text = str(error.orig).lower() if error.orig is not None else str(error).lower()
    # Postgres names the constraint, SQLite names the column
    return "uq_payment_application" in text or "gig_payments.application_id" in text
