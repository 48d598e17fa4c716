"""
Saved payment methods and their verification.

A user adds a bank account, card or PayPal address; it starts unverified.
An admin marks it verified, after which withdrawals may pay out to it.
Card numbers are reduced to brand and last four digits before storage.
"""

import logging
import re
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.errors import AuthorizationError, NotFoundError, ValidationError
from gigwallet.models.enums import PaymentMethodType
from gigwallet.models.payment_method import PaymentMethod
from gigwallet.repos.audit_log_repo import add_audit_log
from gigwallet.repos.payment_method_repo import add_payment_method, get_payment_method

# Configure logging
logger = logging.getLogger(__name__)

ACCOUNT_TYPES = ("savings", "current", "cheque")

ACCOUNT_NUMBER_PATTERN = re.compile(r"[0-9]{6,16}")
BRANCH_CODE_PATTERN = re.compile(r"[0-9]{6}")
CARD_NUMBER_PATTERN = re.compile(r"[0-9]{12,19}")
EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


def card_brand(card_number: str) -> str:
    """Brand from the leading digit."""
    if card_number.startswith("4"):
        return "Visa"
    if card_number.startswith(("5", "2")):
        return "Mastercard"
    if card_number.startswith("3"):
        return "American Express"
    return "Card"


def payout_label(method: PaymentMethod) -> str:
    """Short masked description, e.g. 'FNB ****1234'."""
    if method.type == PaymentMethodType.BANK_ACCOUNT.value:
        return f"{method.bank_name} ****{method.account_number[-4:]}"
    if method.type == PaymentMethodType.CARD.value:
        return f"{method.card_brand} ****{method.card_last_four}"
    return f"PayPal {method.paypal_email}"


def _required(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def _bank_fields(details: dict) -> dict:
    account_number = re.sub(r"\s", "", details.get("account_number") or "")
    if not ACCOUNT_NUMBER_PATTERN.fullmatch(account_number):
        raise ValidationError("Account number must be 6 to 16 digits")
    branch_code = (details.get("branch_code") or "").strip()
    if not BRANCH_CODE_PATTERN.fullmatch(branch_code):
        raise ValidationError("Branch code must be 6 digits")
    account_type = details.get("account_type") or "savings"
    if account_type not in ACCOUNT_TYPES:
        raise ValidationError(f"Account type must be one of: {', '.join(ACCOUNT_TYPES)}")
    return {
        "provider": "manual_eft",
        "bank_name": _required(details.get("bank_name"), "Bank name is required"),
        "account_holder_name": _required(details.get("account_holder_name"), "Account holder name is required"),
        "account_number": account_number,
        "branch_code": branch_code,
        "account_type": account_type,
    }


def _card_fields(details: dict) -> dict:
    card_number = re.sub(r"[\s-]", "", details.get("card_number") or "")
    if not CARD_NUMBER_PATTERN.fullmatch(card_number):
        raise ValidationError("Card number must be 12 to 19 digits")
    return {
        "provider": "payfast",
        "card_last_four": card_number[-4:],
        "card_brand": card_brand(card_number),
    }


def _paypal_fields(details: dict) -> dict:
    email = (details.get("paypal_email") or "").strip()
    if not EMAIL_PATTERN.fullmatch(email):
        raise ValidationError("A valid PayPal email is required")
    return {"provider": "paypal", "paypal_email": email}


FIELD_BUILDERS = {
    PaymentMethodType.BANK_ACCOUNT.value: _bank_fields,
    PaymentMethodType.CARD.value: _card_fields,
    PaymentMethodType.PAYPAL.value: _paypal_fields,
}


async def add_method(
    session: AsyncSession,
    user_id: UUID,
    method_type: str,
    details: dict,
    is_default: bool = False
) -> PaymentMethod:
    """
    Validate and store a new, unverified payment method.

    Args:
        method_type: bank_account, card or paypal
        details: the type's fields; for a card, the full card_number, of
            which only the brand and last four digits are kept

    Raises:
        ValidationError: unknown type or a missing or malformed field
    """
    builder = FIELD_BUILDERS.get(method_type)
    if builder is None:
        raise ValidationError(f"Unsupported payment method type: {method_type}")

    method = await add_payment_method(
        session,
        user_id,
        type=method_type,
        is_default=is_default,
        **builder(details)
    )
    logger.info(f"Payment method {method.id} ({method_type}) added by {user_id}")
    return method


async def verify_method(session: AsyncSession, method_id: UUID, admin_id: UUID) -> PaymentMethod:
    """Admin marks a payment method verified."""
    method = await get_payment_method(session, method_id)
    if method is None:
        raise NotFoundError("Payment method not found")
    if method.is_verified:
        raise ValidationError("Payment method is already verified")

    method.is_verified = True
    add_audit_log(
        session,
        admin_id=admin_id,
        action="verify_payment_method",
        resource_type="payment_method",
        resource_id=method_id,
        details={"type": method.type, "label": payout_label(method)}
    )
    await session.commit()
    logger.info(f"Payment method {method_id} verified by {admin_id}")
    return method


async def get_verified_method(session: AsyncSession, user_id: UUID, method_id: Optional[UUID]) -> PaymentMethod:
    """
    The caller's own verified payment method.

    Raises:
        ValidationError: no method given, or it is not verified
        NotFoundError: no such method
        AuthorizationError: the method belongs to someone else
    """
    if method_id is None:
        raise ValidationError("Please select a verified payment method")
    method = await get_payment_method(session, method_id)
    if method is None:
        raise NotFoundError("Payment method not found")
    if method.user_id != user_id:
        raise AuthorizationError("Payment method does not belong to you")
    if not method.is_verified:
        raise ValidationError("Please select a verified payment method")
    return method
