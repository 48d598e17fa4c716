"""
Integration tests for SA ID verification
"""

import pytest
from datetime import date

from sqlalchemy import select

from gigwallet.core.errors import ConflictError, ValidationError
from gigwallet.models.audit_log import AuditLog
from gigwallet.models.enums import VerificationStatus
from gigwallet.repos.user_repo import get_user_by_id
from gigwallet.services.verification import review_sa_id, submit_sa_id


@pytest.mark.integration
class TestSAIDVerification:

    @pytest.mark.asyncio
    async def test_submit_reads_details_from_number(self, async_session, worker):
        record = await submit_sa_id(async_session, worker.id, "8001015009087", "Thabo", "Mokoena")

        assert record.verification_status == VerificationStatus.PENDING.value
        assert record.date_of_birth == date(1980, 1, 1)
        assert record.gender == "male"
        assert record.citizenship == "SA Citizen"

    @pytest.mark.asyncio
    async def test_invalid_number_rejected(self, async_session, worker):
        with pytest.raises(ValidationError) as exc_info:
            await submit_sa_id(async_session, worker.id, "8001015009088", "Thabo", "Mokoena")
        assert exc_info.value.message == "Invalid South African ID number"

    @pytest.mark.asyncio
    async def test_second_submission_conflicts(self, async_session, worker):
        await submit_sa_id(async_session, worker.id, "8001015009087", "Thabo", "Mokoena")
        with pytest.raises(ConflictError):
            await submit_sa_id(async_session, worker.id, "9202204720083", "Thabo", "Mokoena")

    @pytest.mark.asyncio
    async def test_approval_raises_verification_level(self, session_factory, worker, admin):
        async with session_factory() as session:
            record = await submit_sa_id(session, worker.id, "9202204720083", "Lerato", "Dlamini")

        async with session_factory() as session:
            reviewed = await review_sa_id(session, record.id, admin.id, approve=True, notes="Matches selfie")
        assert reviewed.verification_status == VerificationStatus.APPROVED.value
        assert reviewed.verified_at is not None

        async with session_factory() as session:
            user = await get_user_by_id(session, worker.id)
            assert user.verification_level == 2
            actions = (await session.execute(select(AuditLog.action))).scalars().all()
            assert actions == ["approve_sa_id"]

    @pytest.mark.asyncio
    async def test_rejected_submission_can_be_resubmitted(self, session_factory, worker, admin):
        async with session_factory() as session:
            record = await submit_sa_id(session, worker.id, "8001015009087", "Thabo", "Mokoena")
            record_id = record.id

        async with session_factory() as session:
            await review_sa_id(session, record_id, admin.id, approve=False, notes="Blurry")

        async with session_factory() as session:
            user = await get_user_by_id(session, worker.id)
            assert user.verification_level == 0
            resubmitted = await submit_sa_id(session, worker.id, "8001015009186", "Thabo", "Mokoena")

        assert resubmitted.id == record_id
        assert resubmitted.verification_status == VerificationStatus.PENDING.value
        assert resubmitted.citizenship == "Permanent Resident"
        assert resubmitted.verification_notes is None

    @pytest.mark.asyncio
    async def test_review_is_final(self, session_factory, worker, admin):
        async with session_factory() as session:
            record = await submit_sa_id(session, worker.id, "8001015009087", "Thabo", "Mokoena")

        async with session_factory() as session:
            await review_sa_id(session, record.id, admin.id, approve=True)
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await review_sa_id(session, record.id, admin.id, approve=False)
