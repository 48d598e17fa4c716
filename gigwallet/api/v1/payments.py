"""
Gig payment API endpoints
"""

import logging
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from prometheus_client import Counter
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.auth import get_current_user, resolve_user_from_token
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.user import User
from gigwallet.repos.payment_repo import get_payments_for_user
from gigwallet.services.fees import from_cents
from gigwallet.services.payments import process_gig_payment

logger = logging.getLogger(__name__)

router = APIRouter()

# Payment endpoint answers every failure with the same 400 envelope,
# so it resolves the bearer token itself instead of letting HTTPBearer 403
optional_security = HTTPBearer(auto_error=False)

PAYMENT_OUTCOMES = Counter(
    "gigwallet_payments_total",
    "Gig payment attempts by outcome",
    ["outcome"]
)


class ProcessGigPaymentRequest(BaseModel):
    """Gig payment request model"""
    applicationId: Optional[str] = None
    amount: Optional[Any] = None


def _failure(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@router.post("/process-gig-payment")
async def process_gig_payment_endpoint(
    payment_data: ProcessGigPaymentRequest,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    session: AsyncSession = Depends(get_db)
):
    """
    Pay the worker of an accepted application.

    Success returns the gross, fee and net amounts. Every failure returns
    400 with {"success": false, "error": message}.
    """
    if credentials is None:
        PAYMENT_OUTCOMES.labels(outcome="unauthenticated").inc()
        return _failure("Authentication required")

    try:
        user = await resolve_user_from_token(session, credentials.credentials)
    except HTTPException as e:
        PAYMENT_OUTCOMES.labels(outcome="unauthenticated").inc()
        return _failure(e.detail)

    if not payment_data.applicationId or payment_data.amount in (None, ""):
        PAYMENT_OUTCOMES.labels(outcome="rejected").inc()
        return _failure("Missing required fields: applicationId and amount")

    try:
        application_id = UUID(payment_data.applicationId)
    except ValueError:
        PAYMENT_OUTCOMES.labels(outcome="rejected").inc()
        return _failure("Application not found or not accepted")

    try:
        result = await process_gig_payment(
            session,
            caller_id=user.id,
            application_id=application_id,
            amount=payment_data.amount
        )
    except GigWalletError as e:
        outcome = "retryable" if e.retryable else "rejected"
        PAYMENT_OUTCOMES.labels(outcome=outcome).inc()
        logger.info(f"Payment for application {application_id} refused: {e.message}")
        return _failure(e.message)

    PAYMENT_OUTCOMES.labels(outcome="completed").inc()
    return result.to_response()


@router.get("/")
async def list_my_payments(
    limit: int = 50,
    offset: int = 0,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Payments the current user made or received.
    """
    payments = await get_payments_for_user(session, current_user.id, limit=limit, offset=offset)

    return {
        "payments": [
            {
                "id": str(p.id),
                "application_id": str(p.application_id),
                "gig_id": str(p.gig_id),
                "direction": "out" if p.payer_id == current_user.id else "in",
                "gross_amount": str(from_cents(p.gross_amount_cents)),
                "service_fee": str(from_cents(p.service_fee_cents)),
                "net_amount": str(from_cents(p.net_amount_cents)),
                "status": p.payment_status,
                "created_at": p.created_at.isoformat() if p.created_at else None
            }
            for p in payments
        ]
    }
