"""
Gig and application API endpoints
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.api.errors import to_http_exception
from gigwallet.core.auth import get_current_user
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import get_db
from gigwallet.models.gig import Gig, GigApplication
from gigwallet.models.user import User
from gigwallet.repos.gig_repo import (
    get_applications_by_worker,
    get_applications_for_gig,
    get_gig_by_id,
    get_gigs_by_poster,
    get_open_gigs,
)
from gigwallet.services.applications import (
    apply_to_gig,
    decide_application,
    post_gig,
    update_gig_status,
    withdraw_application,
)
from gigwallet.services.fees import from_cents, to_cents

router = APIRouter()


class GigCreate(BaseModel):
    """Gig creation request model"""
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=1)
    category: str
    location: str = Field(..., min_length=1, max_length=200)
    budget_min: Optional[str] = Field(None, description="Minimum budget (ZAR)")
    budget_max: Optional[str] = Field(None, description="Maximum budget (ZAR)")
    is_urgent: bool = False


class GigStatusUpdate(BaseModel):
    """Gig status change request model"""
    status: str


class ApplicationCreate(BaseModel):
    """Gig application request model"""
    message: Optional[str] = None
    proposed_rate: Optional[str] = Field(None, description="Proposed rate (ZAR)")


class ApplicationDecision(BaseModel):
    """Poster decision on an application"""
    status: str = Field(..., description="accepted or rejected")


def _money(cents: Optional[int]) -> Optional[str]:
    return str(from_cents(cents)) if cents is not None else None


def _gig_response(gig: Gig) -> dict:
    return {
        "id": str(gig.id),
        "poster_id": str(gig.poster_id),
        "title": gig.title,
        "description": gig.description,
        "category": gig.category,
        "location": gig.location,
        "budget_min": _money(gig.budget_min_cents),
        "budget_max": _money(gig.budget_max_cents),
        "is_urgent": gig.is_urgent,
        "status": gig.status,
        "created_at": gig.created_at.isoformat() if gig.created_at else None
    }


def _application_response(application: GigApplication) -> dict:
    return {
        "id": str(application.id),
        "gig_id": str(application.gig_id),
        "worker_id": str(application.worker_id),
        "message": application.message,
        "proposed_rate": _money(application.proposed_rate_cents),
        "status": application.status,
        "created_at": application.created_at.isoformat() if application.created_at else None
    }


@router.post("/gigs", status_code=status.HTTP_201_CREATED)
async def create_gig_endpoint(
    gig_data: GigCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Post a new gig.
    """
    try:
        gig = await post_gig(
            session,
            poster_id=current_user.id,
            title=gig_data.title,
            description=gig_data.description,
            category=gig_data.category,
            location=gig_data.location,
            budget_min_cents=to_cents(gig_data.budget_min) if gig_data.budget_min else None,
            budget_max_cents=to_cents(gig_data.budget_max) if gig_data.budget_max else None,
            is_urgent=gig_data.is_urgent
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return _gig_response(gig)


@router.get("/gigs")
async def list_open_gigs(
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    session: AsyncSession = Depends(get_db)
):
    """
    List open gigs, newest first.
    """
    gigs = await get_open_gigs(session, category=category, limit=limit, offset=offset)
    return {"gigs": [_gig_response(g) for g in gigs]}


@router.get("/gigs/mine")
async def list_my_gigs(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Gigs posted by the current user.
    """
    gigs = await get_gigs_by_poster(session, current_user.id)
    return {"gigs": [_gig_response(g) for g in gigs]}


@router.get("/gigs/{gig_id}")
async def get_gig(
    gig_id: UUID,
    session: AsyncSession = Depends(get_db)
):
    """
    Get gig details.
    """
    gig = await get_gig_by_id(session, gig_id)
    if not gig:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gig not found"
        )
    return _gig_response(gig)


@router.patch("/gigs/{gig_id}/status")
async def update_gig_status_endpoint(
    gig_id: UUID,
    status_data: GigStatusUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Poster moves their gig through its lifecycle.
    """
    try:
        gig = await update_gig_status(session, current_user.id, gig_id, status_data.status)
    except GigWalletError as e:
        raise to_http_exception(e)

    return _gig_response(gig)


@router.post("/gigs/{gig_id}/applications", status_code=status.HTTP_201_CREATED)
async def apply_to_gig_endpoint(
    gig_id: UUID,
    application_data: ApplicationCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Apply to an open gig.
    """
    try:
        rate_cents = to_cents(application_data.proposed_rate) if application_data.proposed_rate else None
        application = await apply_to_gig(
            session,
            worker_id=current_user.id,
            gig_id=gig_id,
            message=application_data.message,
            proposed_rate_cents=rate_cents
        )
    except GigWalletError as e:
        raise to_http_exception(e)

    return _application_response(application)


@router.get("/gigs/{gig_id}/applications")
async def list_gig_applications(
    gig_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Applications for a gig; visible to its poster only.
    """
    gig = await get_gig_by_id(session, gig_id)
    if not gig:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Gig not found"
        )
    if gig.poster_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the gig poster can view applications"
        )

    applications = await get_applications_for_gig(session, gig_id)
    return {"applications": [_application_response(a) for a in applications]}


@router.get("/applications/mine")
async def list_my_applications(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Applications submitted by the current user.
    """
    applications = await get_applications_by_worker(session, current_user.id)
    return {"applications": [_application_response(a) for a in applications]}


@router.post("/applications/{application_id}/decision")
async def decide_application_endpoint(
    application_id: UUID,
    decision: ApplicationDecision,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Poster accepts or rejects an application.
    """
    try:
        application = await decide_application(session, current_user.id, application_id, decision.status)
    except GigWalletError as e:
        raise to_http_exception(e)

    return _application_response(application)


@router.post("/applications/{application_id}/withdraw")
async def withdraw_application_endpoint(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Worker withdraws a pending application.
    """
    try:
        application = await withdraw_application(session, current_user.id, application_id)
    except GigWalletError as e:
        raise to_http_exception(e)

    return _application_response(application)
