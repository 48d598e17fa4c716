"""
Gig and application repository
"""

from typing import Optional, List, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from gigwallet.models.gig import Gig, GigApplication
from gigwallet.models.enums import GigStatus


async def create_gig(
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
    """Create a new open gig."""
    gig = Gig(
        poster_id=poster_id,
        title=title,
        description=description,
        category=category,
        location=location,
        budget_min_cents=budget_min_cents,
        budget_max_cents=budget_max_cents,
        is_urgent=is_urgent,
        status=GigStatus.OPEN.value
    )
    session.add(gig)
    await session.commit()
    await session.refresh(gig)
    return gig


async def get_gig_by_id(session: AsyncSession, gig_id: UUID) -> Optional[Gig]:
    """Get gig by ID."""
    result = await session.execute(
        select(Gig).where(Gig.id == gig_id)
    )
    return result.scalar_one_or_none()


async def get_open_gigs(
    session: AsyncSession,
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0
) -> List[Gig]:
    """Get open gigs, newest first, optionally filtered by category."""
    query = select(Gig).where(Gig.status == GigStatus.OPEN.value)

    if category:
        query = query.where(Gig.category == category)

    query = query.order_by(desc(Gig.created_at)).limit(limit).offset(offset)

    result = await session.execute(query)
    return result.scalars().all()


async def get_gigs_by_poster(session: AsyncSession, poster_id: UUID) -> List[Gig]:
    """Get all gigs posted by a user."""
    result = await session.execute(
        select(Gig)
        .where(Gig.poster_id == poster_id)
        .order_by(desc(Gig.created_at))
    )
    return result.scalars().all()


async def create_application(
    session: AsyncSession,
    gig_id: UUID,
    worker_id: UUID,
    message: Optional[str] = None,
    proposed_rate_cents: Optional[int] = None
) -> GigApplication:
    """Insert a pending application and commit it."""
    application = GigApplication(
        gig_id=gig_id,
        worker_id=worker_id,
        message=message,
        proposed_rate_cents=proposed_rate_cents
    )
    session.add(application)
    await session.commit()
    await session.refresh(application)
    return application


async def get_application_by_id(session: AsyncSession, application_id: UUID) -> Optional[GigApplication]:
    """Get application by ID."""
    result = await session.execute(
        select(GigApplication).where(GigApplication.id == application_id)
    )
    return result.scalar_one_or_none()


async def get_application_with_gig(
    session: AsyncSession,
    application_id: UUID
) -> Optional[Tuple[GigApplication, Gig]]:
    """
    Get an application together with its gig.

    Returns:
        (application, gig) tuple or None if the application does not exist
    """
    result = await session.execute(
        select(GigApplication, Gig)
        .join(Gig, Gig.id == GigApplication.gig_id)
        .where(GigApplication.id == application_id)
    )
    row = result.one_or_none()
    if row is None:
        return None
    return row[0], row[1]


async def get_applications_for_gig(session: AsyncSession, gig_id: UUID) -> List[GigApplication]:
    """Get all applications for a gig, oldest first."""
    result = await session.execute(
        select(GigApplication)
        .where(GigApplication.gig_id == gig_id)
        .order_by(GigApplication.created_at)
    )
    return result.scalars().all()


async def get_applications_by_worker(session: AsyncSession, worker_id: UUID) -> List[GigApplication]:
    """Get all applications made by a worker, newest first."""
    result = await session.execute(
        select(GigApplication)
        .where(GigApplication.worker_id == worker_id)
        .order_by(desc(GigApplication.created_at))
    )
    return result.scalars().all()
