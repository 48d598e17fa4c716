"""
Integration tests for credit purchases
"""

import pytest
from uuid import uuid4

from gigwallet.core.errors import ConflictError, NotFoundError, ValidationError
from gigwallet.models.enums import PurchaseStatus
from gigwallet.services.purchases import confirm_purchase, start_purchase
from tests.fixtures.database import get_wallet_cents, ledger_sum


@pytest.mark.integration
class TestCreditPurchases:

    @pytest.mark.asyncio
    async def test_purchase_is_pending_until_confirmed(self, session_factory, poster):
        async with session_factory() as session:
            purchase = await start_purchase(session, poster.id, "250.00", "payfast")

        assert purchase.status == PurchaseStatus.PENDING.value
        assert purchase.credits_cents == 25000

        async with session_factory() as session:
            assert (await get_wallet_cents(session, poster.id))["balance"] == 0

    @pytest.mark.asyncio
    async def test_confirmation_credits_wallet_once(self, session_factory, poster):
        async with session_factory() as session:
            purchase = await start_purchase(session, poster.id, "250.00")

        async with session_factory() as session:
            result = await confirm_purchase(session, purchase.id, True, external_transaction_id="pf_1")
        assert result.applied is True
        assert result.purchase.status == PurchaseStatus.COMPLETED.value

        async with session_factory() as session:
            replay = await confirm_purchase(session, purchase.id, True, external_transaction_id="pf_1")
        assert replay.applied is False

        async with session_factory() as session:
            wallet = await get_wallet_cents(session, poster.id)
            assert wallet["balance"] == 25000
            assert await ledger_sum(session, poster.id) == 25000

    @pytest.mark.asyncio
    async def test_failed_purchase_credits_nothing(self, session_factory, poster):
        async with session_factory() as session:
            purchase = await start_purchase(session, poster.id, "50.00")

        async with session_factory() as session:
            result = await confirm_purchase(session, purchase.id, False, failure_reason="Card declined")
        assert result.purchase.status == PurchaseStatus.FAILED.value
        assert result.purchase.failure_reason == "Card declined"

        async with session_factory() as session:
            late_success = await confirm_purchase(session, purchase.id, True)
        assert late_success.applied is False
        assert late_success.purchase.status == PurchaseStatus.FAILED.value

        async with session_factory() as session:
            assert (await get_wallet_cents(session, poster.id))["balance"] == 0

    @pytest.mark.asyncio
    async def test_external_transaction_id_is_unique(self, session_factory, poster):
        async with session_factory() as session:
            first = await start_purchase(session, poster.id, "10.00")
            second = await start_purchase(session, poster.id, "20.00")

        async with session_factory() as session:
            await confirm_purchase(session, first.id, True, external_transaction_id="pf_dup")

        async with session_factory() as session:
            with pytest.raises(ConflictError):
                await confirm_purchase(session, second.id, True, external_transaction_id="pf_dup")

        async with session_factory() as session:
            assert (await get_wallet_cents(session, poster.id))["balance"] == 1000

    @pytest.mark.asyncio
    async def test_minimum_purchase(self, async_session, poster):
        with pytest.raises(ValidationError):
            await start_purchase(async_session, poster.id, "0.50")

    @pytest.mark.asyncio
    async def test_unknown_purchase(self, async_session):
        with pytest.raises(NotFoundError):
            await confirm_purchase(async_session, uuid4(), True)
