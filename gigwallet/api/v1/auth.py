"""
Authentication API endpoints
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gigwallet.core.auth import (
    verify_password, get_password_hash, create_access_token,
    create_refresh_token, verify_token, get_current_user
)
from gigwallet.core.config import settings
from gigwallet.db.session import get_db
from gigwallet.repos.user_repo import create_user, get_user_by_email, get_user_by_id
from gigwallet.repos.wallet_repo import create_wallet_for_user
from gigwallet.models.enums import UserStatus, UserType
from gigwallet.models.user import User

router = APIRouter()


class UserRegister(BaseModel):
    """User registration request model"""
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=128)
    user_type: UserType = UserType.BOTH


class UserLogin(BaseModel):
    """User login request model"""
    email: str
    password: str


class TokenResponse(BaseModel):
    """Token response model"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshTokenRequest(BaseModel):
    """Refresh token request model"""
    refresh_token: str


def _issue_tokens(user_id: UUID) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(data={"sub": str(user_id)}),
        refresh_token=create_refresh_token(data={"sub": str(user_id)}),
        expires_in=settings.jwt_access_token_expire_minutes * 60
    )


@router.post("/register", response_model=TokenResponse)
async def register_user(
    user_data: UserRegister,
    session: AsyncSession = Depends(get_db)
):
    """
    Register a new user and create their wallet.
    """
    existing_user = await get_user_by_email(session, user_data.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    try:
        user = await create_user(
            session=session,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            full_name=user_data.full_name,
            user_type=user_data.user_type.value
        )
    except IntegrityError:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    await create_wallet_for_user(session, user.id)

    return _issue_tokens(user.id)


@router.post("/login", response_model=TokenResponse)
async def login_user(
    login_data: UserLogin,
    session: AsyncSession = Depends(get_db)
):
    """
    Login user with email/password.
    """
    user = await get_user_by_email(session, login_data.email)
    if not user or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    if user.status != UserStatus.ACTIVE.value:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is not active"
        )

    return _issue_tokens(user.id)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    token_data: RefreshTokenRequest,
    session: AsyncSession = Depends(get_db)
):
    """
    Refresh access token using refresh token.
    """
    payload = verify_token(token_data.refresh_token, "refresh")
    user_id = payload.get("sub")

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token"
        )

    user = await get_user_by_id(session, UUID(user_id))
    if not user or user.status != UserStatus.ACTIVE.value:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )

    return _issue_tokens(user.id)


@router.get("/me")
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Get current user information.
    """
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "full_name": current_user.full_name,
        "user_type": current_user.user_type,
        "status": current_user.status,
        "is_admin": current_user.is_admin,
        "verification_level": current_user.verification_level,
        "created_at": current_user.created_at.isoformat() if current_user.created_at else None
    }
