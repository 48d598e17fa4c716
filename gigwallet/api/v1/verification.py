"""
Identity verification API endpoints
"""

from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.core.auth import get_current_user
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.user import User
from gigwallet.models.verification import SAIDVerification
from gigwallet.repos.verification_repo import get_verification_for_user
from gigwallet.services.sa_id import extract_sa_id_info
from gigwallet.services.verification import submit_sa_id

router = APIRouter()


class SAIDCheck(BaseModel):
    """SA ID number to validate"""
    id_number: str = Field(..., max_length=32)


class SAIDSubmission(BaseModel):
    """SA ID verification submission"""
    id_number: str = Field(..., max_length=32)
    first_names: str = Field(..., min_length=1, max_length=128)
    surname: str = Field(..., min_length=1, max_length=128)


def verification_to_dict(record: SAIDVerification) -> dict:
    # Only the last four digits leave the service
    return {
        "id": str(record.id),
        "user_id": str(record.user_id),
        "id_number": "*" * 9 + record.id_number[-4:],
        "first_names": record.first_names,
        "surname": record.surname,
        "date_of_birth": record.date_of_birth.isoformat(),
        "gender": record.gender,
        "citizenship": record.citizenship,
        "verification_status": record.verification_status,
        "verification_notes": record.verification_notes,
        "verified_at": record.verified_at.isoformat() if record.verified_at else None
    }


@router.post("/sa-id/validate")
async def validate_sa_id_endpoint(check: SAIDCheck):
    """
    Check an SA ID number and return the details encoded in it.
    """
    info = extract_sa_id_info(check.id_number)
    if info is None:
        return {"valid": False}

    return {
        "valid": True,
        "date_of_birth": info["date_of_birth"].isoformat(),
        "gender": info["gender"],
        "citizenship": info["citizenship"]
    }


@router.post("/sa-id", status_code=status.HTTP_201_CREATED)
async def submit_sa_id_endpoint(
    submission: SAIDSubmission,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Submit an SA ID for admin review.
    """
    try:
        record = await submit_sa_id(
            session,
            user_id=current_user.id,
            id_number=submission.id_number,
            first_names=submission.first_names,
            surname=submission.surname
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return verification_to_dict(record)


@router.get("/sa-id")
async def get_my_verification(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Current user's SA ID verification record.
    """
    record = await get_verification_for_user(session, current_user.id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No verification submitted"
        )
    return verification_to_dict(record)
