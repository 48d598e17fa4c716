"""
Admin API endpoints
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.api.v1.payment_methods import payment_method_to_dict
from gigwallet.api.v1.verification import verification_to_dict
from gigwallet.api.v1.withdrawals import withdrawal_to_dict
from gigwallet.core.auth import get_current_admin
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.enums import VerificationStatus, WithdrawStatus
from gigwallet.models.user import User
from gigwallet.repos.audit_log_repo import get_audit_logs
from gigwallet.repos.payment_method_repo import get_unverified_payment_methods
from gigwallet.repos.user_repo import get_users
from gigwallet.repos.verification_repo import get_verifications_by_status
from gigwallet.repos.withdrawal_repo import get_withdrawal, get_withdrawals_by_status
from gigwallet.services.payment_methods import verify_method
from gigwallet.services.verification import review_sa_id
from gigwallet.services.withdrawals import approve_withdrawal, reject_withdrawal
from gigwallet.tasks.tasks import process_withdrawal

logger = logging.getLogger(__name__)

router = APIRouter()


class ReviewRequest(BaseModel):
    """Admin review notes"""
    notes: Optional[str] = None


@router.get("/users")
async def list_users(
    limit: int = Query(50, le=200),
    offset: int = 0,
    status: Optional[str] = None,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    List users (admin only).
    """
    users = await get_users(session, limit=limit, offset=offset, status=status)
    return {
        "users": [
            {
                "id": str(u.id),
                "email": u.email,
                "full_name": u.full_name,
                "user_type": u.user_type,
                "status": u.status,
                "is_admin": u.is_admin,
                "verification_level": u.verification_level
            }
            for u in users
        ]
    }


@router.get("/withdrawals")
async def list_withdrawals_by_status(
    status: str = WithdrawStatus.PENDING.value,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Withdrawals in one status, oldest first. Defaults to the review queue.
    """
    withdrawals = await get_withdrawals_by_status(session, status)
    return {"withdrawals": [withdrawal_to_dict(w) for w in withdrawals]}


@router.post("/withdrawals/{withdrawal_id}/requeue")
async def requeue_withdrawal_endpoint(
    withdrawal_id: UUID,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Queue the payout job again for an approved withdrawal whose job was lost.
    """
    withdrawal = await get_withdrawal(session, withdrawal_id)
    if withdrawal is None:
        raise HTTPException(status_code=404, detail="Withdrawal not found")
    if withdrawal.status != WithdrawStatus.APPROVED.value:
        raise HTTPException(status_code=400, detail=f"Withdrawal is {withdrawal.status}, not approved")

    process_withdrawal.delay(str(withdrawal_id))
    logger.info(f"Withdrawal {withdrawal_id} requeued by {current_admin.id}")
    return {"withdrawal": withdrawal_to_dict(withdrawal), "message": "Payout queued"}


@router.post("/withdrawals/{withdrawal_id}/approve")
async def approve_withdrawal_endpoint(
    withdrawal_id: UUID,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Approve a withdrawal and queue the payout job that debits the wallet.
    """
    try:
        withdrawal = await approve_withdrawal(session, withdrawal_id, current_admin.id)
    except GigWalletError as e:
        raise to_http_exception(e)

    process_withdrawal.delay(str(withdrawal_id))
    logger.info(f"Withdrawal {withdrawal_id} approved by {current_admin.id}, payout queued")

    return {
        "withdrawal": withdrawal_to_dict(withdrawal),
        "message": "Withdrawal approved, payout queued"
    }


@router.post("/withdrawals/{withdrawal_id}/reject")
async def reject_withdrawal_endpoint(
    withdrawal_id: UUID,
    review: ReviewRequest,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Reject a pending withdrawal; the wallet is not touched.
    """
    try:
        withdrawal = await reject_withdrawal(session, withdrawal_id, current_admin.id, notes=review.notes)
    except GigWalletError as e:
        raise to_http_exception(e)

    return {"withdrawal": withdrawal_to_dict(withdrawal)}


@router.get("/verifications")
async def list_pending_verifications(
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    SA ID verifications waiting for review.
    """
    records = await get_verifications_by_status(session, VerificationStatus.PENDING.value)
    return {"verifications": [verification_to_dict(r) for r in records]}


@router.post("/verifications/{verification_id}/approve")
async def approve_verification_endpoint(
    verification_id: UUID,
    review: ReviewRequest,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Approve an SA ID verification.
    """
    try:
        record = await review_sa_id(session, verification_id, current_admin.id, approve=True, notes=review.notes)
    except GigWalletError as e:
        raise to_http_exception(e)

    return {"verification": verification_to_dict(record)}


@router.post("/verifications/{verification_id}/reject")
async def reject_verification_endpoint(
    verification_id: UUID,
    review: ReviewRequest,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Reject an SA ID verification.
    """
    try:
        record = await review_sa_id(session, verification_id, current_admin.id, approve=False, notes=review.notes)
    except GigWalletError as e:
        raise to_http_exception(e)

    return {"verification": verification_to_dict(record)}


@router.get("/payment-methods")
async def list_unverified_payment_methods(
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Payment methods waiting for verification, oldest first.
    """
    methods = await get_unverified_payment_methods(session)
    return {"payment_methods": [payment_method_to_dict(m) for m in methods]}


@router.post("/payment-methods/{method_id}/verify")
async def verify_payment_method_endpoint(
    method_id: UUID,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Mark a payment method verified so withdrawals can pay out to it.
    """
    try:
        method = await verify_method(session, method_id, current_admin.id)
    except GigWalletError as e:
        raise to_http_exception(e)

    return {"payment_method": payment_method_to_dict(method)}


@router.get("/audit-logs")
async def list_audit_logs(
    limit: int = Query(50, le=200),
    offset: int = 0,
    action: Optional[str] = None,
    current_admin: User = Depends(get_current_admin),
    session: AsyncSession = Depends(get_db)
):
    """
    Admin audit trail, newest first.
    """
    logs = await get_audit_logs(session, limit=limit, offset=offset, action=action)
    return {"audit_logs": [log.to_dict() for log in logs]}
