# storefront/domain/errors.py
"""Wyjatki domeny cart/checkout.

Serwisy rzucaja je wewnetrznie, a na granicy publicznej zamieniaja
na OperationResult / OrderResult z komunikatem dla uzytkownika.
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    """Missing or invalid input (negative quantity, missing address, terms not accepted)."""

    kind = "validation"


class StockError(StorefrontError):
    """Requested quantity exceeds available stock."""

    kind = "stock"

    def __init__(self, product_id: str | None = None, requested: int | None = None, available: int | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__("Not enough stock")


class NotFoundError(StorefrontError):
    """Referenced product or order is not present in the current scope."""

    kind = "not_found"


class PersistenceError(StorefrontError):
    """Stored JSON is malformed or has the wrong shape."""

    kind = "persistence"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Corrupted entry {key}: {reason}")


class OrderInProgressError(StorefrontError):
    """Another order placement is already running for this checkout."""

    kind = "processing"

    def __init__(self):
        super().__init__("Order is already being processed")
