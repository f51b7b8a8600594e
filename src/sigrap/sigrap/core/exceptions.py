class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or malformed."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class InsufficientStockError(DomainError):
    """Raised when a product's stock cannot cover a requested decrement."""

    def __init__(self, message: str, *, product_id: int | None = None):
        super().__init__(message)
        self.product_id = product_id


class InvariantViolationError(DomainError):
    """Raised when a request breaks a sale/return invariant (e.g. over-return)."""
