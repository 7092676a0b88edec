from typing import Any, Dict, Optional


class BillingError(Exception):
    """Base error for the billing core. Rendered as ApiResponse(error=...)."""

    status_code = 400

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BillingError):
    """Input rejected before any computation or write was attempted."""

    status_code = 400


class ComputationError(BillingError):
    """Invalid numeric input (NaN, infinite, negative) reached the tax boundary."""

    status_code = 422


class DuplicateNumberError(BillingError):
    """A final document number collided with an already issued one."""

    status_code = 409

    def __init__(self, document: str, number: int):
        super().__init__(
            f"{document} #{number} already exists. Please use a different number.",
            details={"document": document, "number": number},
        )
        self.document = document
        self.number = number


class NotFoundError(BillingError):
    status_code = 404


class LookupServiceError(BillingError):
    """GSTIN lookup service not configured (503) or failing upstream (502)."""

    status_code = 502

    def __init__(self, message: str, status_code: int = 502, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)
        self.status_code = status_code
