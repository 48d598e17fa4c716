"""
Integration tests for gig payment processing against a real database
"""

import pytest
from unittest.mock import AsyncMock, patch
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from gigwallet.core.errors import (
    AuthorizationError,
    ConflictError,
    InsufficientFundsError,
    TransactionFailedError,
    ValidationError,
)
from gigwallet.models.enums import ApplicationStatus, GigStatus, LedgerEntryType
from gigwallet.models.payment import GigPayment
from gigwallet.repos.gig_repo import get_application_with_gig
from gigwallet.repos.ledger_repo import get_ledger_entries_for_application
from gigwallet.services.applications import apply_to_gig, post_gig
from gigwallet.services.payments import process_gig_payment
from tests.fixtures.database import (
    create_accepted_application,
    create_test_user_with_wallet,
    fund_wallet,
    get_wallet_cents,
    ledger_sum,
)


async def count_rows(session, model):
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.mark.integration
class TestGigPayment:

    @pytest.mark.asyncio
    async def test_payment_conserves_money(self, session_factory, poster, worker):
        """Payer loses gross, payee gains net, gross == fee + net"""
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 150000)
            _, application_id = await create_accepted_application(session, poster.id, worker.id)

        async with session_factory() as session:
            result = await process_gig_payment(session, poster.id, application_id, 1000)

        assert result.gross_amount == result.service_fee + result.net_amount
        assert str(result.service_fee) == "30.00"
        assert str(result.net_amount) == "970.00"

        async with session_factory() as session:
            payer = await get_wallet_cents(session, poster.id)
            payee = await get_wallet_cents(session, worker.id)

            assert payer == {"balance": 50000, "earned": 0, "spent": 100000}
            assert payee == {"balance": 97000, "earned": 97000, "spent": 0}
            assert await ledger_sum(session, poster.id) == payer["balance"]
            assert await ledger_sum(session, worker.id) == payee["balance"]

    @pytest.mark.asyncio
    async def test_odd_amount_fee(self, session_factory, poster, worker):
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 5000)
            _, application_id = await create_accepted_application(session, poster.id, worker.id)

        async with session_factory() as session:
            result = await process_gig_payment(session, poster.id, application_id, "33.33")

        assert str(result.service_fee) == "1.00"
        assert str(result.net_amount) == "32.33"

        async with session_factory() as session:
            assert (await get_wallet_cents(session, poster.id))["balance"] == 5000 - 3333
            assert (await get_wallet_cents(session, worker.id))["balance"] == 3233

    @pytest.mark.asyncio
    async def test_payment_records_ledger_and_completes_gig(self, session_factory, poster, worker):
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 100000)
            gig_id, application_id = await create_accepted_application(session, poster.id, worker.id)

        async with session_factory() as session:
            await process_gig_payment(session, poster.id, application_id, "1000.00")

        async with session_factory() as session:
            entries = await get_ledger_entries_for_application(session, application_id)
            by_user_type = {(e.user_id, e.type): e for e in entries}

            assert len(entries) == 3
            payer_debit = by_user_type[(poster.id, LedgerEntryType.GIG_PAYMENT.value)]
            payee_credit = by_user_type[(worker.id, LedgerEntryType.GIG_PAYMENT.value)]
            fee_entry = by_user_type[(worker.id, LedgerEntryType.SERVICE_FEE.value)]

            assert payer_debit.amount_cents == -100000
            assert payer_debit.balance_after_cents == 0
            assert payee_credit.amount_cents == 100000
            assert fee_entry.amount_cents == -3000
            assert fee_entry.reference_entry_id == payee_credit.id
            assert fee_entry.balance_after_cents == 97000
            assert all(e.gig_id == gig_id for e in entries)

            payment = (await session.execute(select(GigPayment))).scalar_one()
            assert payment.payment_status == "completed"
            assert payment.gross_amount_cents == 100000
            assert payment.service_fee_cents == 3000
            assert payment.net_amount_cents == 97000

            application, gig = await get_application_with_gig(session, application_id)
            assert gig.status == GigStatus.COMPLETED.value

    @pytest.mark.asyncio
    async def test_second_payment_is_a_conflict(self, session_factory, poster, worker):
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 300000)
            _, application_id = await create_accepted_application(session, poster.id, worker.id)

        async with session_factory() as session:
            await process_gig_payment(session, poster.id, application_id, 1000)

        async with session_factory() as session:
            with pytest.raises(ConflictError) as exc_info:
                await process_gig_payment(session, poster.id, application_id, 1000)
            assert exc_info.value.message == "Payment already processed for this application"

        async with session_factory() as session:
            assert (await get_wallet_cents(session, poster.id))["balance"] == 200000
            assert (await get_wallet_cents(session, worker.id))["balance"] == 97000

    @pytest.mark.asyncio
    async def test_unique_constraint_stops_payment_that_passed_the_precheck(
        self, session_factory, poster, worker
    ):
        """A racing request that slipped past the existence check still fails"""
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 300000)
            _, application_id = await create_accepted_application(session, poster.id, worker.id)

        async with session_factory() as session:
            await process_gig_payment(session, poster.id, application_id, 1000)

        with patch(
            "gigwallet.services.payments.get_payment_for_application",
            new=AsyncMock(return_value=None)
        ):
            async with session_factory() as session:
                with pytest.raises(ConflictError):
                    await process_gig_payment(session, poster.id, application_id, 1000)

        async with session_factory() as session:
            assert await count_rows(session, GigPayment) == 1
            assert len(await get_ledger_entries_for_application(session, application_id)) == 3
            assert (await get_wallet_cents(session, poster.id))["balance"] == 200000
            assert (await get_wallet_cents(session, worker.id))["balance"] == 97000

    @pytest.mark.asyncio
    async def test_insufficient_funds_changes_nothing(self, session_factory, poster, worker):
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 5000)
            _, application_id = await create_accepted_application(session, poster.id, worker.id)

        async with session_factory() as session:
            with pytest.raises(InsufficientFundsError):
                await process_gig_payment(session, poster.id, application_id, "100.00")

        async with session_factory() as session:
            assert await get_wallet_cents(session, poster.id) == {"balance": 5000, "earned": 0, "spent": 0}
            assert await get_wallet_cents(session, worker.id) == {"balance": 0, "earned": 0, "spent": 0}
            assert await count_rows(session, GigPayment) == 0
            assert await get_ledger_entries_for_application(session, application_id) == []

    @pytest.mark.asyncio
    async def test_non_poster_rejected_for_accepted_application(self, session_factory, poster, worker):
        async with session_factory() as session:
            stranger = await create_test_user_with_wallet(session, "stranger@example.com")
            await fund_wallet(session, stranger.id, 100000)
            _, application_id = await create_accepted_application(session, poster.id, worker.id)

        async with session_factory() as session:
            with pytest.raises(AuthorizationError) as exc_info:
                await process_gig_payment(session, stranger.id, application_id, 10)
            assert exc_info.value.message == "Only the gig poster can process payment"

    @pytest.mark.asyncio
    async def test_non_poster_rejected_for_pending_application(self, session_factory, poster, worker):
        async with session_factory() as session:
            gig = await post_gig(session, poster.id, "Walk the dog", "Twice a day", "pet_care", "Durban")
            application = await apply_to_gig(session, worker.id, gig.id)
            application_id = application.id

        async with session_factory() as session:
            with pytest.raises(AuthorizationError):
                await process_gig_payment(session, worker.id, application_id, 10)

    @pytest.mark.asyncio
    async def test_pending_application_cannot_be_paid(self, session_factory, poster, worker):
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 100000)
            gig = await post_gig(session, poster.id, "Walk the dog", "Twice a day", "pet_care", "Durban")
            application = await apply_to_gig(session, worker.id, gig.id)
            application_id = application.id

        async with session_factory() as session:
            with pytest.raises(ValidationError) as exc_info:
                await process_gig_payment(session, poster.id, application_id, 10)
            assert exc_info.value.message == "Application not found or not accepted"

    @pytest.mark.asyncio
    async def test_unknown_application(self, session_factory, poster):
        async with session_factory() as session:
            with pytest.raises(ValidationError) as exc_info:
                await process_gig_payment(session, poster.id, uuid4(), 10)
            assert exc_info.value.message == "Application not found or not accepted"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -10, "abc"])
    async def test_bad_amount_rejected_before_lookup(self, session_factory, poster, amount):
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await process_gig_payment(session, poster.id, uuid4(), amount)

    @pytest.mark.asyncio
    async def test_payee_wallet_created_lazily(self, session_factory, poster):
        """A worker who never had a wallet gets one inside the payment"""
        async with session_factory() as session:
            from gigwallet.repos.user_repo import create_user
            walletless = await create_user(session, "new@example.com", "!", "New Worker")
            await fund_wallet(session, poster.id, 10000)
            _, application_id = await create_accepted_application(session, poster.id, walletless.id)

        async with session_factory() as session:
            await process_gig_payment(session, poster.id, application_id, 50)

        async with session_factory() as session:
            assert (await get_wallet_cents(session, walletless.id))["balance"] == 4850

    @pytest.mark.asyncio
    async def test_retry_after_infrastructure_failure(self, session_factory, poster, worker):
        """A failed atomic step leaves nothing behind and the retry succeeds once"""
        async with session_factory() as session:
            await fund_wallet(session, poster.id, 100000)
            _, application_id = await create_accepted_application(session, poster.id, worker.id)

        failing = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")))
        with patch("gigwallet.services.payments.post_ledger_entry", new=failing):
            async with session_factory() as session:
                with pytest.raises(TransactionFailedError) as exc_info:
                    await process_gig_payment(session, poster.id, application_id, 500)
                assert exc_info.value.retryable is True
                assert exc_info.value.message == "Payment processing failed"

        async with session_factory() as session:
            assert await count_rows(session, GigPayment) == 0
            assert await get_ledger_entries_for_application(session, application_id) == []
            assert (await get_wallet_cents(session, poster.id))["balance"] == 100000
            application, gig = await get_application_with_gig(session, application_id)
            assert application.status == ApplicationStatus.ACCEPTED.value
            assert gig.status == GigStatus.IN_PROGRESS.value

        async with session_factory() as session:
            result = await process_gig_payment(session, poster.id, application_id, 500)
        assert str(result.net_amount) == "485.00"

        async with session_factory() as session:
            assert await count_rows(session, GigPayment) == 1
            assert (await get_wallet_cents(session, poster.id))["balance"] == 50000
            assert (await get_wallet_cents(session, worker.id))["balance"] == 48500
            with pytest.raises(ConflictError):
                await process_gig_payment(session, poster.id, application_id, 500)
