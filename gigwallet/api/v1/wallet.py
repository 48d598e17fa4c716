"""
Wallet API endpoints
"""

from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.core.auth import get_current_user
from gigwallet.core.config import settings
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.user import User
from gigwallet.repos.ledger_repo import get_ledger_entries_for_user
from gigwallet.repos.wallet_repo import get_wallet_for_user
from gigwallet.services.fees import from_cents
from gigwallet.services.purchases import start_purchase

router = APIRouter()


class WalletBalance(BaseModel):
    """Wallet balance response model"""
    balance: str
    total_earned: str
    total_spent: str
    currency: str


class PurchaseRequest(BaseModel):
    """Credit purchase request model"""
    amount: str = Field(..., description="Amount to buy (ZAR); credits are 1:1")
    payment_provider: str = Field(default="manual", max_length=64)


class PurchaseResponse(BaseModel):
    """Credit purchase response model"""
    purchase_id: str
    amount: str
    credits: str
    status: str
    message: str


@router.get("/", response_model=WalletBalance)
async def get_wallet_balance(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Get current user's wallet balance and lifetime totals.
    """
    wallet = await get_wallet_for_user(session, current_user.id)
    if not wallet:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wallet not found"
        )

    return WalletBalance(
        balance=str(from_cents(wallet.balance_cents)),
        total_earned=str(from_cents(wallet.total_earned_cents)),
        total_spent=str(from_cents(wallet.total_spent_cents)),
        currency=settings.currency
    )


@router.get("/transactions")
async def get_wallet_transactions(
    limit: int = 50,
    offset: int = 0,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Ledger entries for the current user, newest first.
    """
    entries = await get_ledger_entries_for_user(session, current_user.id, limit=limit, offset=offset)

    return {
        "transactions": [
            {
                "id": str(e.id),
                "type": e.type,
                "amount": str(from_cents(e.amount_cents)),
                "balance_after": str(from_cents(e.balance_after_cents)),
                "description": e.description,
                "status": e.status,
                "reference_entry_id": str(e.reference_entry_id) if e.reference_entry_id else None,
                "gig_id": str(e.gig_id) if e.gig_id else None,
                "application_id": str(e.application_id) if e.application_id else None,
                "created_at": e.created_at.isoformat() if e.created_at else None
            }
            for e in entries
        ],
        "limit": limit,
        "offset": offset
    }


@router.post("/purchases", response_model=PurchaseResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase_request(
    purchase_data: PurchaseRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Start a credit purchase. Credits land once the provider confirms it.
    """
    try:
        purchase = await start_purchase(
            session,
            user_id=current_user.id,
            amount=purchase_data.amount,
            payment_provider=purchase_data.payment_provider
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return PurchaseResponse(
        purchase_id=str(purchase.id),
        amount=str(from_cents(purchase.amount_cents)),
        credits=str(from_cents(purchase.credits_cents)),
        status=purchase.status,
        message="Purchase created, awaiting payment confirmation"
    )
