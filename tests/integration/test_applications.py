"""
Integration tests for gig posting and the application state machine
"""

import pytest
from uuid import uuid4

from gigwallet.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from gigwallet.models.enums import ApplicationStatus, GigStatus
from gigwallet.repos.gig_repo import get_application_with_gig, get_open_gigs
from gigwallet.services.applications import (
    apply_to_gig,
    decide_application,
    post_gig,
    update_gig_status,
    withdraw_application,
)
from tests.fixtures.database import create_test_user_with_wallet


async def open_gig(session, poster_id):
    return await post_gig(
        session,
        poster_id=poster_id,
        title="Move a couch",
        description="Third floor, no lift",
        category="moving",
        location="Johannesburg",
        budget_min_cents=20000,
        budget_max_cents=50000
    )


@pytest.mark.integration
class TestPostGig:

    @pytest.mark.asyncio
    async def test_post_gig(self, async_session, poster):
        gig = await open_gig(async_session, poster.id)
        assert gig.status == GigStatus.OPEN.value
        assert gig.category == "moving"

        gigs = await get_open_gigs(async_session, category="moving")
        assert [g.id for g in gigs] == [gig.id]

    @pytest.mark.asyncio
    async def test_unknown_category(self, async_session, poster):
        with pytest.raises(ValidationError):
            await post_gig(async_session, poster.id, "Title", "Desc", "astrology", "Pretoria")

    @pytest.mark.asyncio
    async def test_budget_range_must_be_ordered(self, async_session, poster):
        with pytest.raises(ValidationError) as exc_info:
            await post_gig(
                async_session, poster.id, "Title", "Desc", "other", "Pretoria",
                budget_min_cents=5000, budget_max_cents=1000
            )
        assert exc_info.value.message == "Minimum budget cannot exceed maximum budget"

    @pytest.mark.asyncio
    async def test_only_poster_updates_gig_status(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        with pytest.raises(AuthorizationError):
            await update_gig_status(async_session, worker.id, gig.id, GigStatus.CANCELLED.value)

        gig = await update_gig_status(async_session, poster.id, gig.id, GigStatus.CANCELLED.value)
        assert gig.status == GigStatus.CANCELLED.value

    @pytest.mark.asyncio
    async def test_cancelled_gig_cannot_reopen(self, async_session, poster):
        gig = await open_gig(async_session, poster.id)
        await update_gig_status(async_session, poster.id, gig.id, GigStatus.CANCELLED.value)
        with pytest.raises(ValidationError):
            await update_gig_status(async_session, poster.id, gig.id, GigStatus.OPEN.value)


@pytest.mark.integration
class TestApplications:

    @pytest.mark.asyncio
    async def test_apply_and_accept_moves_gig_in_progress(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        application = await apply_to_gig(async_session, worker.id, gig.id, "I have a bakkie", 30000)
        assert application.status == ApplicationStatus.PENDING.value

        application = await decide_application(
            async_session, poster.id, application.id, ApplicationStatus.ACCEPTED.value
        )
        assert application.status == ApplicationStatus.ACCEPTED.value

        _, gig = await get_application_with_gig(async_session, application.id)
        assert gig.status == GigStatus.IN_PROGRESS.value

    @pytest.mark.asyncio
    async def test_reject_leaves_gig_open(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        application = await apply_to_gig(async_session, worker.id, gig.id)
        await decide_application(async_session, poster.id, application.id, ApplicationStatus.REJECTED.value)

        _, gig = await get_application_with_gig(async_session, application.id)
        assert gig.status == GigStatus.OPEN.value

    @pytest.mark.asyncio
    async def test_duplicate_application(self, session_factory, poster, worker):
        async with session_factory() as session:
            gig = await open_gig(session, poster.id)
            gig_id = gig.id
            await apply_to_gig(session, worker.id, gig_id)

        async with session_factory() as session:
            with pytest.raises(ConflictError) as exc_info:
                await apply_to_gig(session, worker.id, gig_id)
            assert exc_info.value.message == "You have already applied to this gig"

    @pytest.mark.asyncio
    async def test_cannot_apply_to_own_gig(self, async_session, poster):
        gig = await open_gig(async_session, poster.id)
        with pytest.raises(ValidationError):
            await apply_to_gig(async_session, poster.id, gig.id)

    @pytest.mark.asyncio
    async def test_cannot_apply_to_missing_gig(self, async_session, worker):
        with pytest.raises(NotFoundError):
            await apply_to_gig(async_session, worker.id, uuid4())

    @pytest.mark.asyncio
    async def test_cannot_apply_to_gig_in_progress(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        application = await apply_to_gig(async_session, worker.id, gig.id)
        await decide_application(async_session, poster.id, application.id, ApplicationStatus.ACCEPTED.value)

        latecomer = await create_test_user_with_wallet(async_session, "late@example.com")
        with pytest.raises(ValidationError) as exc_info:
            await apply_to_gig(async_session, latecomer.id, gig.id)
        assert exc_info.value.message == "Gig is not open for applications"

    @pytest.mark.asyncio
    async def test_non_positive_rate_rejected(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        with pytest.raises(ValidationError):
            await apply_to_gig(async_session, worker.id, gig.id, proposed_rate_cents=0)

    @pytest.mark.asyncio
    async def test_only_poster_decides(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        application = await apply_to_gig(async_session, worker.id, gig.id)
        with pytest.raises(AuthorizationError):
            await decide_application(async_session, worker.id, application.id, ApplicationStatus.ACCEPTED.value)

    @pytest.mark.asyncio
    async def test_decision_is_final(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        application = await apply_to_gig(async_session, worker.id, gig.id)
        await decide_application(async_session, poster.id, application.id, ApplicationStatus.REJECTED.value)
        with pytest.raises(ValidationError):
            await decide_application(async_session, poster.id, application.id, ApplicationStatus.ACCEPTED.value)

    @pytest.mark.asyncio
    async def test_decision_must_be_accept_or_reject(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        application = await apply_to_gig(async_session, worker.id, gig.id)
        with pytest.raises(ValidationError):
            await decide_application(async_session, poster.id, application.id, ApplicationStatus.WITHDRAWN.value)

    @pytest.mark.asyncio
    async def test_worker_withdraws_pending_application(self, async_session, poster, worker):
        gig = await open_gig(async_session, poster.id)
        application = await apply_to_gig(async_session, worker.id, gig.id)

        with pytest.raises(AuthorizationError):
            await withdraw_application(async_session, poster.id, application.id)

        application = await withdraw_application(async_session, worker.id, application.id)
        assert application.status == ApplicationStatus.WITHDRAWN.value
