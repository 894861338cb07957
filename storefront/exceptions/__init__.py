"""Custom exceptions for the storefront application."""

class StorefrontError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class BusinessLogicError(StorefrontError):
    """Exception raised for business logic violations."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)

class ValidationError(StorefrontError):
    """Raised when a request payload is incomplete or malformed."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)

class NotFoundError(StorefrontError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class UnauthorizedError(StorefrontError):
    """Raised when a request lacks valid admin credentials."""
    def __init__(self, message="Unauthorized access"):
        super().__init__(message, 401)


class OrderPlacementError(BusinessLogicError):
    """Any failure that aborts a checkout transaction."""


class ProductNotFoundError(OrderPlacementError):
    """Raised when a line item references a product that no longer exists."""
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")

class InsufficientStockError(OrderPlacementError):
    """Raised when an operation fails due to lack of stock."""
    def __init__(self, product_name, required, available):
        self.product_name = product_name
        self.required = required
        self.available = available
        message = f"Insufficient stock for {product_name}. Available: {available}"
        super().__init__(message, payload={'available': available})

class TransactionConflictError(OrderPlacementError):
    """Raised when the database rejects a write because of a concurrent transaction."""
    def __init__(self, message="The order could not be completed because of a concurrent update. Please try again."):
        super().__init__(message)
