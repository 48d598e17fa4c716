"""
User model
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
from gigwallet.models.enums import UserStatus, UserType
import uuid


class User(Base):
    """User model - a poster, a worker, or both"""
    __tablename__ = "users"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    full_name = Column(String(128), nullable=False)
    user_type = Column(String(16), nullable=False, default=UserType.BOTH.value)
    status = Column(String(16), nullable=False, default=UserStatus.ACTIVE.value)
    is_admin = Column(Boolean, nullable=False, default=False)
    verification_level = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, type={self.user_type})>"
