"""
Translate domain errors into HTTP errors
"""

from fastapi import HTTPException, status

from gigwallet.core.errors import (
    AuthorizationError,
    ConflictError,
    GigWalletError,
    InsufficientFundsError,
    NotFoundError,
    TransactionFailedError,
)

STATUS_BY_ERROR = {
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InsufficientFundsError: status.HTTP_400_BAD_REQUEST,
    TransactionFailedError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(error: GigWalletError) -> HTTPException:
    """Map a domain error to an HTTPException; unmapped classes become 400"""
    for error_class, code in STATUS_BY_ERROR.items():
        if isinstance(error, error_class):
            return HTTPException(status_code=code, detail=error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
