"""
SA ID verification submissions and review.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.errors import ConflictError, NotFoundError, ValidationError
from gigwallet.models.enums import VerificationStatus
from gigwallet.models.verification import SAIDVerification
from gigwallet.repos.audit_log_repo import add_audit_log
from gigwallet.repos.user_repo import get_user_by_id
from gigwallet.repos.verification_repo import get_verification_by_id, get_verification_for_user
from gigwallet.services.sa_id import extract_sa_id_info

# Configure logging
logger = logging.getLogger(__name__)

# Verification level gained once an SA ID is approved
SA_ID_VERIFICATION_LEVEL = 2


async def submit_sa_id(
    session: AsyncSession,
    user_id: UUID,
    id_number: str,
    first_names: str,
    surname: str
) -> SAIDVerification:
    """Store a pending SA ID verification with the details read from the number."""
    info = extract_sa_id_info(id_number)
    if info is None:
        raise ValidationError("Invalid South African ID number")

    existing = await get_verification_for_user(session, user_id)
    if existing is not None and existing.verification_status != VerificationStatus.REJECTED.value:
        raise ConflictError("An ID verification has already been submitted")

    if existing is not None:
        # Resubmission after a rejection reuses the row
        record = existing
        record.id_number = id_number.strip()
        record.first_names = first_names
        record.surname = surname
        record.verification_status = VerificationStatus.PENDING.value
        record.verification_notes = None
    else:
        record = SAIDVerification(user_id=user_id, id_number=id_number.strip(), first_names=first_names, surname=surname)
        session.add(record)

    record.date_of_birth = info["date_of_birth"]
    record.gender = info["gender"]
    record.citizenship = info["citizenship"]

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("An ID verification has already been submitted")

    logger.info(f"SA ID verification {record.id} submitted by {user_id}")
    return record


async def review_sa_id(
    session: AsyncSession,
    verification_id: UUID,
    admin_id: UUID,
    approve: bool,
    notes: Optional[str] = None
) -> SAIDVerification:
    """Admin decision on a pending verification; approval raises the user's level."""
    record = await get_verification_by_id(session, verification_id)
    if record is None:
        raise NotFoundError("Verification not found")
    if record.verification_status not in (VerificationStatus.PENDING.value, VerificationStatus.IN_REVIEW.value):
        raise ValidationError(f"Verification is already {record.verification_status}")

    record.verification_notes = notes
    if approve:
        record.verification_status = VerificationStatus.APPROVED.value
        record.verified_at = datetime.now(timezone.utc)
        user = await get_user_by_id(session, record.user_id)
        if user is not None and user.verification_level < SA_ID_VERIFICATION_LEVEL:
            user.verification_level = SA_ID_VERIFICATION_LEVEL
    else:
        record.verification_status = VerificationStatus.REJECTED.value

    add_audit_log(
        session,
        admin_id=admin_id,
        action="approve_sa_id" if approve else "reject_sa_id",
        resource_type="sa_id_verification",
        resource_id=verification_id,
        details={"notes": notes}
    )
    await session.commit()
    logger.info(f"SA ID verification {verification_id} {record.verification_status} by {admin_id}")
    return record
