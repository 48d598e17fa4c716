"""
Audit log repository for admin action tracking
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc

from gigwallet.models.audit_log import AuditLog


def add_audit_log(
    session: AsyncSession,
    admin_id: Optional[UUID],
    action: str,
    resource_type: str,
    resource_id: UUID,
    details: Optional[dict] = None
) -> AuditLog:
    """
    Stage an audit log entry in the caller's transaction.

    Args:
        session: Database session
        admin_id: Admin user ID who performed the action (None for system)
        action: Action performed
        resource_type: Type of resource affected
        resource_id: ID of resource affected
        details: Additional details as JSON

    Returns:
        Pending AuditLog instance
    """
    # Include resource info in details since the model doesn't have separate fields
    enhanced_details = {
        **(details or {}),
        "resource_type": resource_type,
        "resource_id": str(resource_id)
    }

    audit_log = AuditLog(
        admin_id=admin_id,
        action=action,
        details=enhanced_details
    )
    session.add(audit_log)
    return audit_log


async def get_audit_logs(
    session: AsyncSession,
    limit: int = 50,
    offset: int = 0,
    action: Optional[str] = None
) -> List[AuditLog]:
    """Get audit logs, newest first, optionally filtered by action."""
    query = select(AuditLog).order_by(desc(AuditLog.created_at))

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit).offset(offset)

    result = await session.execute(query)
    return result.scalars().all()
