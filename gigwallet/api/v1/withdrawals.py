"""
Withdrawal API endpoints
"""

from uuid import UUID

from fastapi import APIRouter, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.core.auth import get_current_user
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.user import User
from gigwallet.models.withdrawal import Withdrawal
from gigwallet.repos.withdrawal_repo import get_withdrawals_by_user
from gigwallet.services.fees import calculate_withdrawal_fee, from_cents, to_cents
from gigwallet.services.withdrawals import request_withdrawal

router = APIRouter()


class WithdrawalRequest(BaseModel):
    """Withdrawal request model"""
    amount: str = Field(..., description="Amount to withdraw (ZAR)")
    payment_method_id: UUID = Field(..., description="One of your verified payment methods")


def withdrawal_to_dict(withdrawal: Withdrawal) -> dict:
    return {
        "id": str(withdrawal.id),
        "user_id": str(withdrawal.user_id),
        "amount": str(from_cents(withdrawal.amount_cents)),
        "withdrawal_fee": str(from_cents(withdrawal.withdrawal_fee_cents)),
        "net_amount": str(from_cents(withdrawal.net_amount_cents)),
        "payment_method_id": str(withdrawal.payment_method_id) if withdrawal.payment_method_id else None,
        "payout_reference": withdrawal.payout_reference,
        "status": withdrawal.status,
        "processing_notes": withdrawal.processing_notes,
        "processed_at": withdrawal.processed_at.isoformat() if withdrawal.processed_at else None,
        "created_at": withdrawal.created_at.isoformat() if withdrawal.created_at else None
    }


@router.get("/fee")
async def quote_withdrawal_fee(amount: str):
    """
    Quote the fee for withdrawing amount.
    """
    try:
        fees = calculate_withdrawal_fee(to_cents(amount))
    except GigWalletError as e:
        raise to_http_exception(e)

    return {
        "amount": str(from_cents(fees.gross_cents)),
        "withdrawal_fee": str(from_cents(fees.fee_cents)),
        "net_amount": str(from_cents(fees.net_cents))
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_withdrawal_request(
    withdrawal_data: WithdrawalRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Request a withdrawal. Funds leave the wallet once an admin approves it
    and the payout job runs.
    """
    try:
        withdrawal = await request_withdrawal(
            session,
            user_id=current_user.id,
            amount=withdrawal_data.amount,
            payment_method_id=withdrawal_data.payment_method_id
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return withdrawal_to_dict(withdrawal)


@router.get("/")
async def list_my_withdrawals(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Current user's withdrawal requests, newest first.
    """
    withdrawals = await get_withdrawals_by_user(session, current_user.id)
    return {"withdrawals": [withdrawal_to_dict(w) for w in withdrawals]}
