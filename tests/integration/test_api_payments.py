"""
Integration tests for the gig payment HTTP endpoint
"""

import pytest
from uuid import uuid4

from tests.fixtures.database import (
    auth_headers,
    create_accepted_application,
    create_test_user_with_wallet,
    fund_wallet,
    get_wallet_cents,
)

PAYMENT_URL = "/api/v1/payments/process-gig-payment"


@pytest.fixture
async def accepted_application(session_factory, poster, worker):
    async with session_factory() as session:
        await fund_wallet(session, poster.id, 100000)
        _, application_id = await create_accepted_application(session, poster.id, worker.id)
    return application_id


@pytest.mark.integration
class TestProcessGigPaymentEndpoint:

    @pytest.mark.asyncio
    async def test_successful_payment(self, test_client, session_factory, poster, worker, accepted_application):
        response = await test_client.post(
            PAYMENT_URL,
            json={"applicationId": str(accepted_application), "amount": 1000},
            headers=auth_headers(poster.id)
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Payment processed successfully",
            "grossAmount": 1000.0,
            "serviceFee": 30.0,
            "netAmount": 970.0,
        }

        async with session_factory() as session:
            assert (await get_wallet_cents(session, poster.id))["balance"] == 0
            assert (await get_wallet_cents(session, worker.id))["balance"] == 97000

    @pytest.mark.asyncio
    async def test_duplicate_payment(self, test_client, poster, accepted_application):
        body = {"applicationId": str(accepted_application), "amount": 100}
        first = await test_client.post(PAYMENT_URL, json=body, headers=auth_headers(poster.id))
        second = await test_client.post(PAYMENT_URL, json=body, headers=auth_headers(poster.id))

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json() == {"success": False, "error": "Payment already processed for this application"}

    @pytest.mark.asyncio
    async def test_missing_fields(self, test_client, poster):
        response = await test_client.post(PAYMENT_URL, json={}, headers=auth_headers(poster.id))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Missing required fields: applicationId and amount"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -1, "abc", "1e30", "99999999999999999999", "1000000.01"])
    async def test_bad_amount(self, test_client, poster, accepted_application, amount):
        response = await test_client.post(
            PAYMENT_URL,
            json={"applicationId": str(accepted_application), "amount": amount},
            headers=auth_headers(poster.id)
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_insufficient_funds(self, test_client, poster, accepted_application):
        response = await test_client.post(
            PAYMENT_URL,
            json={"applicationId": str(accepted_application), "amount": "1000.01"},
            headers=auth_headers(poster.id)
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Insufficient credits. Please add credits to your wallet.",
        }

    @pytest.mark.asyncio
    async def test_not_the_poster(self, test_client, session_factory, accepted_application):
        async with session_factory() as session:
            stranger = await create_test_user_with_wallet(session, "stranger@example.com")

        response = await test_client.post(
            PAYMENT_URL,
            json={"applicationId": str(accepted_application), "amount": 10},
            headers=auth_headers(stranger.id)
        )
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Only the gig poster can process payment"}

    @pytest.mark.asyncio
    async def test_unknown_or_malformed_application(self, test_client, poster):
        for application_id in (str(uuid4()), "not-a-uuid"):
            response = await test_client.post(
                PAYMENT_URL,
                json={"applicationId": application_id, "amount": 10},
                headers=auth_headers(poster.id)
            )
            assert response.status_code == 400
            assert response.json() == {"success": False, "error": "Application not found or not accepted"}

    @pytest.mark.asyncio
    async def test_unauthenticated(self, test_client, accepted_application):
        response = await test_client.post(
            PAYMENT_URL,
            json={"applicationId": str(accepted_application), "amount": 10}
        )
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Authentication required"}

    @pytest.mark.asyncio
    async def test_bad_token(self, test_client, accepted_application):
        response = await test_client.post(
            PAYMENT_URL,
            json={"applicationId": str(accepted_application), "amount": 10},
            headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_list_payments_both_sides(self, test_client, poster, worker, accepted_application):
        await test_client.post(
            PAYMENT_URL,
            json={"applicationId": str(accepted_application), "amount": 200},
            headers=auth_headers(poster.id)
        )

        paid = await test_client.get("/api/v1/payments/", headers=auth_headers(poster.id))
        received = await test_client.get("/api/v1/payments/", headers=auth_headers(worker.id))

        assert paid.status_code == 200
        [out] = paid.json()["payments"]
        [incoming] = received.json()["payments"]
        assert out["direction"] == "out"
        assert incoming["direction"] == "in"
        assert out["gross_amount"] == "200.00"
        assert incoming["net_amount"] == "194.00"
