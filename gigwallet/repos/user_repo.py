"""
User repository with async CRUD operations
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from gigwallet.models.user import User
from gigwallet.models.enums import UserStatus, UserType


async def create_user(
    session: AsyncSession,
    email: str,
    password_hash: str,
    full_name: str,
    user_type: str = UserType.BOTH.value,
    is_admin: bool = False,
    status: str = UserStatus.ACTIVE.value
) -> User:
    """
    Create a new user.

    Args:
        session: Database session
        email: Email address (must be unique, stored lower-cased)
        password_hash: bcrypt hash of the password
        full_name: Display name
        user_type: job_poster, gig_worker or both
        is_admin: Grants access to admin endpoints
        status: User status (default: ACTIVE)

    Returns:
        Created User instance
    """
    user = User(
        email=email.strip().lower(),
        password_hash=password_hash,
        full_name=full_name,
        user_type=user_type,
        is_admin=is_admin,
        status=status
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def get_user_by_id(session: AsyncSession, user_id: UUID) -> Optional[User]:
    """Get user by ID."""
    result = await session.execute(
        select(User).where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """Get user by email, case-insensitively."""
    result = await session.execute(
        select(User).where(User.email == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def get_users(
    session: AsyncSession,
    limit: int = 50,
    offset: int = 0,
    status: Optional[str] = None
) -> List[User]:
    """
    Get list of users.

    Args:
        session: Database session
        limit: Maximum number of users to return
        offset: Number of users to skip
        status: Filter by user status

    Returns:
        List of User instances
    """
    query = select(User).order_by(desc(User.created_at))

    if status:
        query = query.where(User.status == UserStatus(status).value)

    query = query.limit(limit).offset(offset)

    result = await session.execute(query)
    return result.scalars().all()
