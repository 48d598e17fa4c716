"""
Gig posting and the application state machine.

Application states move only forward:

    pending -> accepted   (poster)
    pending -> rejected   (poster)
    pending -> withdrawn  (worker)

Payment is only possible once an application is accepted.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from gigwallet.models.enums import ApplicationStatus, GigCategory, GigStatus
from gigwallet.models.gig import Gig, GigApplication
from gigwallet.repos.gig_repo import (
    create_application,
    create_gig,
    get_application_with_gig,
    get_gig_by_id,
)

# Configure logging
logger = logging.getLogger(__name__)

APPLICATION_TRANSITIONS = {
    ApplicationStatus.PENDING.value: {
        ApplicationStatus.ACCEPTED.value,
        ApplicationStatus.REJECTED.value,
        ApplicationStatus.WITHDRAWN.value,
    },
    ApplicationStatus.ACCEPTED.value: set(),
    ApplicationStatus.REJECTED.value: set(),
    ApplicationStatus.WITHDRAWN.value: set(),
}

GIG_TRANSITIONS = {
    GigStatus.OPEN.value: {GigStatus.IN_PROGRESS.value, GigStatus.CANCELLED.value},
    GigStatus.IN_PROGRESS.value: {GigStatus.COMPLETED.value, GigStatus.CANCELLED.value},
    GigStatus.COMPLETED.value: set(),
    GigStatus.CANCELLED.value: set(),
}


def _check_transition(table: dict, current: str, new: str, what: str) -> None:
    if new not in table.get(current, set()):
        raise ValidationError(f"Cannot move {what} from {current} to {new}")


async def post_gig(
    session: AsyncSession,
    poster_id: UUID,
    title: str,
    description: str,
    category: str,
    location: str,
    budget_min_cents: Optional[int] = None,
    budget_max_cents: Optional[int] = None,
    is_urgent: bool = False
) -> Gig:
    """Validate and create an open gig."""
    try:
        category = GigCategory(category).value
    except ValueError:
        raise ValidationError(f"Unknown gig category: {category}")

    for value in (budget_min_cents, budget_max_cents):
        if value is not None and value < 0:
            raise ValidationError("Budget cannot be negative")
    if (
        budget_min_cents is not None
        and budget_max_cents is not None
        and budget_min_cents > budget_max_cents
    ):
        raise ValidationError("Minimum budget cannot exceed maximum budget")

    gig = await create_gig(
        session,
        poster_id=poster_id,
        title=title,
        description=description,
        category=category,
        location=location,
        budget_min_cents=budget_min_cents,
        budget_max_cents=budget_max_cents,
        is_urgent=is_urgent
    )
    logger.info(f"Gig {gig.id} posted by {poster_id}")
    return gig


async def update_gig_status(session: AsyncSession, caller_id: UUID, gig_id: UUID, new_status: str) -> Gig:
    """Poster-driven gig status change."""
    gig = await get_gig_by_id(session, gig_id)
    if gig is None:
        raise NotFoundError("Gig not found")
    if gig.poster_id != caller_id:
        raise AuthorizationError("Only the gig poster can update this gig")

    _check_transition(GIG_TRANSITIONS, gig.status, new_status, "gig")
    gig.status = new_status
    await session.commit()
    return gig


async def apply_to_gig(
    session: AsyncSession,
    worker_id: UUID,
    gig_id: UUID,
    message: Optional[str] = None,
    proposed_rate_cents: Optional[int] = None
) -> GigApplication:
    """
    Submit a worker's application.

    Raises:
        NotFoundError: gig does not exist
        ValidationError: gig not open, poster applying to own gig, bad rate
        ConflictError: worker already applied to this gig
    """
    gig = await get_gig_by_id(session, gig_id)
    if gig is None:
        raise NotFoundError("Gig not found")
    if gig.status != GigStatus.OPEN.value:
        raise ValidationError("Gig is not open for applications")
    if gig.poster_id == worker_id:
        raise ValidationError("You cannot apply to your own gig")
    if proposed_rate_cents is not None and proposed_rate_cents <= 0:
        raise ValidationError("Proposed rate must be positive")

    try:
        application = await create_application(
            session,
            gig_id=gig_id,
            worker_id=worker_id,
            message=message,
            proposed_rate_cents=proposed_rate_cents
        )
    except IntegrityError:
        await session.rollback()
        raise ConflictError("You have already applied to this gig")

    logger.info(f"Worker {worker_id} applied to gig {gig_id}")
    return application


async def decide_application(
    session: AsyncSession,
    caller_id: UUID,
    application_id: UUID,
    new_status: str
) -> GigApplication:
    """Poster accepts or rejects a pending application."""
    if new_status not in (ApplicationStatus.ACCEPTED.value, ApplicationStatus.REJECTED.value):
        raise ValidationError("Status must be accepted or rejected")

    found = await get_application_with_gig(session, application_id)
    if found is None:
        raise NotFoundError("Application not found")
    application, gig = found

    if gig.poster_id != caller_id:
        raise AuthorizationError("Only the gig poster can review applications")

    _check_transition(APPLICATION_TRANSITIONS, application.status, new_status, "application")
    application.status = new_status

    if new_status == ApplicationStatus.ACCEPTED.value and gig.status == GigStatus.OPEN.value:
        gig.status = GigStatus.IN_PROGRESS.value

    await session.commit()
    logger.info(f"Application {application_id} {new_status} by {caller_id}")
    return application


async def withdraw_application(session: AsyncSession, caller_id: UUID, application_id: UUID) -> GigApplication:
    """Worker withdraws their own pending application."""
    found = await get_application_with_gig(session, application_id)
    if found is None:
        raise NotFoundError("Application not found")
    application, _ = found

    if application.worker_id != caller_id:
        raise AuthorizationError("Only the applicant can withdraw this application")

    _check_transition(
        APPLICATION_TRANSITIONS,
        application.status,
        ApplicationStatus.WITHDRAWN.value,
        "application"
    )
    application.status = ApplicationStatus.WITHDRAWN.value
    await session.commit()
    return application
