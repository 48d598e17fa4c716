"""
Concurrent payment tests against a file-backed SQLite database

The shared in-memory fixture runs every session on one connection, so it
cannot show two transactions racing. Here each request gets its own
connection and SQLite's write lock serialises the two payments.
"""

import asyncio

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from gigwallet.core.errors import ConflictError
from gigwallet.db.base import Base
from gigwallet.db.session import get_db
from gigwallet.main import app
from gigwallet.models.ledger_entry import LedgerEntry
from gigwallet.models.payment import GigPayment
from gigwallet.services.payments import process_gig_payment
from tests.fixtures.database import (
    auth_headers,
    create_accepted_application,
    create_test_user_with_wallet,
    fund_wallet,
    get_wallet_cents,
    ledger_sum,
)

PAYMENT_URL = "/api/v1/payments/process-gig-payment"


@pytest.fixture
async def file_session_factory(tmp_path):
    """Session factory over a database file; every session has its own connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        echo=False,
        connect_args={"timeout": 30}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def file_client(file_session_factory):
    async def get_file_db():
        async with file_session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = get_file_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def funded_application(file_session_factory):
    """(poster, worker, application_id) with R1000 in the poster's wallet."""
    async with file_session_factory() as session:
        poster = await create_test_user_with_wallet(session, "poster@example.com", "Pat Poster")
        worker = await create_test_user_with_wallet(session, "worker@example.com", "Wes Worker")
        await fund_wallet(session, poster.id, 100000)
        _, application_id = await create_accepted_application(session, poster.id, worker.id)
    return poster, worker, application_id


async def count_for_application(session, model, application_id):
    result = await session.execute(
        select(func.count()).select_from(model).where(model.application_id == application_id)
    )
    return result.scalar_one()


@pytest.mark.integration
class TestConcurrentPayments:

    @pytest.mark.asyncio
    async def test_two_simultaneous_requests_pay_once(self, file_client, file_session_factory, funded_application):
        poster, worker, application_id = funded_application
        body = {"applicationId": str(application_id), "amount": "200.00"}

        responses = await asyncio.gather(
            file_client.post(PAYMENT_URL, json=body, headers=auth_headers(poster.id)),
            file_client.post(PAYMENT_URL, json=body, headers=auth_headers(poster.id)),
        )

        assert sorted(r.status_code for r in responses) == [200, 400]
        [rejected] = [r for r in responses if r.status_code == 400]
        assert rejected.json() == {
            "success": False,
            "error": "Payment already processed for this application",
        }

        async with file_session_factory() as session:
            assert await count_for_application(session, GigPayment, application_id) == 1
            # payer debit, payee credit, service fee
            assert await count_for_application(session, LedgerEntry, application_id) == 3

            payer = await get_wallet_cents(session, poster.id)
            payee = await get_wallet_cents(session, worker.id)
            assert payer["balance"] == 100000 - 20000
            assert payee["balance"] == 20000 - 600
            assert await ledger_sum(session, poster.id) == payer["balance"]
            assert await ledger_sum(session, worker.id) == payee["balance"]

    @pytest.mark.asyncio
    async def test_racing_service_calls_raise_one_conflict(self, file_session_factory, funded_application):
        poster, _, application_id = funded_application

        async def pay():
            async with file_session_factory() as session:
                return await process_gig_payment(session, poster.id, application_id, "150.00")

        outcomes = await asyncio.gather(pay(), pay(), pay(), return_exceptions=True)

        conflicts = [o for o in outcomes if isinstance(o, ConflictError)]
        successes = [o for o in outcomes if not isinstance(o, Exception)]
        assert len(successes) == 1
        assert len(conflicts) == 2

        async with file_session_factory() as session:
            assert (await get_wallet_cents(session, poster.id))["balance"] == 100000 - 15000
