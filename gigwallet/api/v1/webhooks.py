"""
Webhook API endpoints for payment provider callbacks
"""

import hashlib
import hmac
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Request, Depends
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.core.config import settings
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.services.fees import from_cents
from gigwallet.services.purchases import confirm_purchase

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


class PurchaseWebhookPayload(BaseModel):
    """Provider callback for a credit purchase"""
    purchase_id: UUID = Field(..., description="Purchase being settled")
    status: str = Field(..., pattern="^(completed|failed)$")
    external_transaction_id: Optional[str] = Field(None, max_length=128)
    failure_reason: Optional[str] = None


class WebhookResponse(BaseModel):
    """Webhook response model"""
    ok: bool
    applied: bool
    status: str
    credits: str


def verify_webhook_signature(request: Request, body: bytes) -> bool:
    """
    Verify webhook signature using HMAC-SHA256.

    Args:
        request: FastAPI request object
        body: Raw request body

    Returns:
        True if signature is valid, False otherwise (including when no
        webhook secret is configured)
    """
    if not settings.webhook_secret:
        return False

    signature = request.headers.get("X-Signature")
    if not signature:
        return False

    if signature.startswith("sha256="):
        signature = signature[7:]

    expected_signature = hmac.new(
        settings.webhook_secret.encode(),
        body,
        hashlib.sha256
    ).hexdigest()

    return hmac.compare_digest(signature, expected_signature)


@router.post("/purchases", response_model=WebhookResponse)
async def purchase_webhook(
    request: Request,
    session: AsyncSession = Depends(get_db)
):
    """
    Confirm or fail a pending credit purchase.

    Replays of an already settled purchase return applied=false and change
    nothing.
    """
    body = await request.body()
    if not verify_webhook_signature(request, body):
        logger.warning("Purchase webhook rejected: bad or missing signature")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature"
        )

    try:
        payload = PurchaseWebhookPayload.model_validate_json(body)
    except PydanticValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook payload"
        )

    logger.info(f"Received purchase webhook for {payload.purchase_id}: {payload.status}")

    try:
        result = await confirm_purchase(
            session,
            purchase_id=payload.purchase_id,
            succeeded=payload.status == "completed",
            external_transaction_id=payload.external_transaction_id,
            failure_reason=payload.failure_reason
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return WebhookResponse(
        ok=True,
        applied=result.applied,
        status=result.purchase.status,
        credits=str(from_cents(result.purchase.credits_cents))
    )


@router.get("/health")
async def webhook_health():
    """Health check for webhook endpoints."""
    return {
        "status": "ok",
        "service": "webhooks",
        "endpoints": ["/api/v1/webhooks/purchases"]
    }
