"""Domain error taxonomy.

Every error carries a stable ``code`` and an HTTP ``status_code`` so that the
API layer can render it without inspecting the message. ``public_detail`` is
what clients see; the exception message itself may be more specific and is
only meant for logs.
"""
from fastapi import status


class PbankError(Exception):
    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST
    public_detail = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_detail)


# Authentication

class AuthError(PbankError):
    code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    public_detail = "Not authenticated"


class InvalidCredentials(AuthError):
    code = "invalid_credentials"
    public_detail = "Invalid username or password"


class TokenError(AuthError):
    # expired and invalid tokens share one response body
    code = "unauthorized"
    public_detail = "Invalid or expired token"


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass


# Validation

class ValidationError(PbankError):
    code = "validation_error"
    status_code = 422
    public_detail = "Invalid request"


class InvalidQuantity(ValidationError):
    code = "invalid_quantity"
    public_detail = "Quantity must be a positive integer"


class InvalidPrice(ValidationError):
    code = "invalid_price"
    public_detail = "Price must be positive"


class StockNotFound(ValidationError):
    code = "stock_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    public_detail = "Stock not found"


class UsernameTaken(ValidationError):
    code = "username_taken"
    status_code = status.HTTP_409_CONFLICT
    public_detail = "Username already exists"


class SymbolTaken(ValidationError):
    code = "symbol_taken"
    status_code = status.HTTP_409_CONFLICT
    public_detail = "Symbol already exists"


# Ledger

class LedgerError(PbankError):
    code = "ledger_error"
    status_code = status.HTTP_409_CONFLICT


class InsufficientHoldings(LedgerError):
    code = "insufficient_holdings"
    public_detail = "Insufficient holdings"

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Requested {requested}, holding {available}")


# Storage

class StorageError(PbankError):
    code = "storage_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    public_detail = "Storage unavailable"
