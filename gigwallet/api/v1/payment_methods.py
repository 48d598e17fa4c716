"""
Payment method API endpoints
"""

from typing import Optional

from fastapi import APIRouter, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.core.auth import get_current_user
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.payment_method import PaymentMethod
from gigwallet.models.user import User
from gigwallet.repos.payment_method_repo import get_payment_methods_for_user
from gigwallet.services.payment_methods import add_method, payout_label

router = APIRouter()


class PaymentMethodCreate(BaseModel):
    """New payment method; which fields are required depends on type"""
    type: str = Field(..., description="bank_account, card or paypal")
    is_default: bool = False
    bank_name: Optional[str] = Field(None, max_length=128)
    account_holder_name: Optional[str] = Field(None, max_length=128)
    account_number: Optional[str] = Field(None, max_length=32)
    branch_code: Optional[str] = Field(None, max_length=16)
    account_type: Optional[str] = Field(None, max_length=16)
    card_number: Optional[str] = Field(None, max_length=32)
    paypal_email: Optional[str] = Field(None, max_length=255)


def payment_method_to_dict(method: PaymentMethod) -> dict:
    # Account numbers leave the service masked
    return {
        "id": str(method.id),
        "user_id": str(method.user_id),
        "type": method.type,
        "provider": method.provider,
        "label": payout_label(method),
        "bank_name": method.bank_name,
        "account_holder_name": method.account_holder_name,
        "account_number": "****" + method.account_number[-4:] if method.account_number else None,
        "account_type": method.account_type,
        "card_last_four": method.card_last_four,
        "card_brand": method.card_brand,
        "paypal_email": method.paypal_email,
        "is_verified": method.is_verified,
        "is_default": method.is_default,
        "created_at": method.created_at.isoformat() if method.created_at else None
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_payment_method(
    method_data: PaymentMethodCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Add a payment method. It must be verified by an admin before
    withdrawals can pay out to it.
    """
    details = method_data.model_dump(exclude={"type", "is_default"})
    try:
        method = await add_method(
            session,
            current_user.id,
            method_data.type,
            details,
            is_default=method_data.is_default
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return payment_method_to_dict(method)


@router.get("/")
async def list_my_payment_methods(
    verified_only: bool = False,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Current user's payment methods, default first.
    """
    methods = await get_payment_methods_for_user(session, current_user.id)
    if verified_only:
        methods = [m for m in methods if m.is_verified]
    return {"payment_methods": [payment_method_to_dict(m) for m in methods]}
