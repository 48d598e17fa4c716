"""
Status and category enums stored as plain strings
"""

import enum


class UserStatus(enum.Enum):
    """User status enum"""
    ACTIVE = "active"
    SUSPENDED = "suspended"


class UserType(enum.Enum):
    """Which side of the marketplace a user works on"""
    JOB_POSTER = "job_poster"
    GIG_WORKER = "gig_worker"
    BOTH = "both"


class GigCategory(enum.Enum):
    """Gig category enum"""
    CLEANING = "cleaning"
    MOVING = "moving"
    DELIVERY = "delivery"
    HANDYMAN = "handyman"
    GARDENING = "gardening"
    TECH_SUPPORT = "tech_support"
    TUTORING = "tutoring"
    PET_CARE = "pet_care"
    EVENT_HELP = "event_help"
    OTHER = "other"


class GigStatus(enum.Enum):
    """Gig status enum"""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ApplicationStatus(enum.Enum):
    """Application status enum"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class PaymentStatus(enum.Enum):
    """Gig payment status enum"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class LedgerEntryType(enum.Enum):
    """Ledger entry type enum"""
    PURCHASE = "purchase"
    GIG_PAYMENT = "gig_payment"
    SERVICE_FEE = "service_fee"
    WITHDRAWAL = "withdrawal"


class PurchaseStatus(enum.Enum):
    """Credit purchase status enum"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class WithdrawStatus(enum.Enum):
    """Withdraw status enum"""
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"


class VerificationStatus(enum.Enum):
    """Identity verification status enum"""
    PENDING = "pending"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class PaymentMethodType(enum.Enum):
    """Payout and payment method type enum"""
    BANK_ACCOUNT = "bank_account"
    CARD = "card"
    PAYPAL = "paypal"
