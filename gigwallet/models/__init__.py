# Models Package
from .user import User
from .gig import Gig, GigApplication
from .wallet import Wallet
from .ledger_entry import LedgerEntry
from .payment import GigPayment
from .purchase import CreditPurchase
from .withdrawal import Withdrawal
from .verification import SAIDVerification
from .audit_log import AuditLog
from .payment_method import PaymentMethod
from .review import Review

__all__ = [
    "User",
    "Gig",
    "GigApplication",
    "Wallet",
    "LedgerEntry",
    "GigPayment",
    "CreditPurchase",
    "Withdrawal",
    "SAIDVerification",
    "AuditLog",
    "PaymentMethod",
    "Review"
]
