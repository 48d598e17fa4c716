"""
Money helpers and fee calculations.

All balances and amounts are stored as integer cents. Conversions from
caller-supplied decimals happen once at the API edge via to_cents().
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import NamedTuple, Optional, Union

from gigwallet.core.config import settings
from gigwallet.core.errors import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Largest amount whose cents fit a signed 64-bit column
MAX_CENTS = 2 ** 63 - 1
MAX_AMOUNT = Decimal(MAX_CENTS) / HUNDRED


class FeeBreakdown(NamedTuple):
    """Gross amount split into platform fee and net payout, in cents"""
    gross_cents: int
    fee_cents: int
    net_cents: int


def to_cents(amount: Union[Decimal, str, int, float]) -> int:
    """
    Convert a currency amount to integer cents.

    Floats are routed through str() so 33.33 stays 33.33. Amounts with more
    than two decimal places are rejected rather than silently rounded.
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Invalid amount format")

    if not value.is_finite():
        raise ValidationError("Invalid amount format")
    if abs(value) > MAX_AMOUNT:
        raise ValidationError("Amount is out of range")

    try:
        rounded = value.quantize(CENT)
    except InvalidOperation:
        raise ValidationError("Amount is out of range")
    if value != rounded:
        raise ValidationError("Amount cannot have more than 2 decimal places")

    return int(value * HUNDRED)


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a 2dp Decimal"""
    return (Decimal(cents) / HUNDRED).quantize(CENT)


def percentage_of(cents: int, pct: Union[Decimal, str]) -> int:
    """pct percent of cents, rounded half-up to the nearest cent"""
    raw = Decimal(cents) * Decimal(str(pct)) / HUNDRED
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_service_fee(gross_cents: int, fee_pct: Optional[str] = None) -> FeeBreakdown:
    """
    Split a gig payment into service fee and net amount.

    Args:
        gross_cents: Gross payment in cents (must be positive)
        fee_pct: Fee percentage (uses settings.service_fee_pct if None)

    Returns:
        FeeBreakdown where gross == fee + net exactly
    """
    if gross_cents <= 0:
        raise ValidationError("Invalid payment amount")

    if fee_pct is None:
        fee_pct = settings.service_fee_pct

    fee_cents = percentage_of(gross_cents, fee_pct)
    return FeeBreakdown(gross_cents, fee_cents, gross_cents - fee_cents)


def calculate_withdrawal_fee(amount_cents: int) -> FeeBreakdown:
    """Withdrawal fee is the larger of the flat fee and the percentage fee"""
    if amount_cents <= 0:
        raise ValidationError("Invalid withdrawal amount")

    flat_cents = to_cents(settings.withdrawal_flat_fee)
    pct_cents = percentage_of(amount_cents, settings.withdrawal_fee_pct)
    fee_cents = max(flat_cents, pct_cents)
    return FeeBreakdown(amount_cents, fee_cents, amount_cents - fee_cents)
