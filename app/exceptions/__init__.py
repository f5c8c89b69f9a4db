"""Custom exceptions for the VendStats application."""

class VendStatsError(Exception):
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

class ValidationError(VendStatsError):
    """Raised when a request payload fails validation."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)

class NotFoundError(VendStatsError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class PaywallRequiredError(VendStatsError):
    """Raised when an action needs premium access the user does not have."""
    def __init__(self, message="Premium access required", feature=None):
        payload = {'paywall': True}
        if feature:
            payload['feature'] = feature
        super().__init__(message, 402, payload)

class PurchaseError(VendStatsError):
    """Raised when the store reports a failed purchase."""
    def __init__(self, message, code='PURCHASE_FAILED', user_cancelled=False):
        super().__init__(message, 402, {'code': code, 'user_cancelled': user_cancelled})
        self.code = code
        self.user_cancelled = user_cancelled

class PersistenceError(VendStatsError):
    """Raised by strict storage when a durable write fails."""
    def __init__(self, message="Could not persist data"):
        super().__init__(message, 500)

class StorageNotInitializedError(PersistenceError):
    """Raised when storage is read before initialize() ran."""
    def __init__(self, message="Storage read before initialize()"):
        super().__init__(message)
