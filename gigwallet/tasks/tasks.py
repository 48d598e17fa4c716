"""
Celery background tasks
"""

import asyncio
import logging
from uuid import UUID

from gigwallet.celery_app import celery
from gigwallet.core.errors import GigWalletError
from gigwallet.db.session import AsyncSessionLocal
from gigwallet.services.withdrawals import fulfil_withdrawal

# Configure logging
logger = logging.getLogger(__name__)


async def run_withdrawal(withdrawal_id: UUID) -> str:
    """Fulfil one withdrawal in a fresh session and return its final status."""
    async with AsyncSessionLocal() as session:
        withdrawal = await fulfil_withdrawal(session, withdrawal_id)
        return withdrawal.status


@celery.task(bind=True, max_retries=3, default_retry_delay=60)
def process_withdrawal(self, withdrawal_id: str):
    """
    Debit the wallet for an approved withdrawal.

    Args:
        withdrawal_id: Withdrawal UUID as string

    Infrastructure failures are retried with exponential backoff; domain
    errors (unknown withdrawal) are not.
    """
    logger.info(f"Processing withdrawal: {withdrawal_id}")

    try:
        final_status = asyncio.run(run_withdrawal(UUID(withdrawal_id)))

    except GigWalletError as exc:
        if not exc.retryable:
            logger.error(f"Withdrawal {withdrawal_id} not processed: {exc.message}")
            raise
        if self.request.retries < self.max_retries:
            logger.info(f"Retrying withdrawal {withdrawal_id} (attempt {self.request.retries + 1})")
            raise self.retry(exc=exc, countdown=60 * (2 ** self.request.retries))
        logger.error(f"Max retries exceeded for withdrawal {withdrawal_id}")
        raise

    logger.info(f"Withdrawal {withdrawal_id} finished as {final_status}")
    return final_status
