"""
Domain exceptions raised by the service layer.

Routers translate these into HTTP responses; nothing below the API layer
knows about status codes.
"""


class GigWalletError(Exception):
    """Base class for all request-scoped domain errors"""

    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GigWalletError):
    """Bad or missing input, or an entity in the wrong state"""


class AuthorizationError(GigWalletError):
    """Caller is not allowed to perform the action"""


class NotFoundError(GigWalletError):
    """Referenced entity does not exist"""


class ConflictError(GigWalletError):
    """Action already happened (duplicate payment, duplicate application)"""


class InsufficientFundsError(GigWalletError):
    """Wallet balance does not cover the requested debit"""


class TransactionFailedError(GigWalletError):
    """Atomic mutation failed for infrastructure reasons and was rolled back"""

    retryable = True
