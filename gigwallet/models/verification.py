"""
SA ID verification model
"""

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.sql import func
from gigwallet.db.base import Base
from gigwallet.models.enums import VerificationStatus
import uuid


class SAIDVerification(Base):
    """South African ID details submitted for identity proofing"""
    __tablename__ = "sa_id_verification"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True)
    id_number = Column(String(13), nullable=False)
    first_names = Column(String(128), nullable=False)
    surname = Column(String(128), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(16), nullable=False)
    citizenship = Column(String(32), nullable=False)
    verification_status = Column(String(16), nullable=False, default=VerificationStatus.PENDING.value)
    verification_notes = Column(Text, nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<SAIDVerification(id={self.id}, user_id={self.user_id}, status={self.verification_status})>"
