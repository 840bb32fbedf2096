"""Service layer exception classes for luna-ops.

Every error raised to an API or CLI caller derives from LunaOpsError and
carries a stable ``error_code`` plus the HTTP status the API renders it with.

Exception Hierarchy:
    LunaOpsError
    ├── InsufficientStock
    ├── PaymentNotConfirmed
    ├── ConfigurationError
    ├── TransactionConflict
    ├── ExternalServiceError
    ├── OrderCreationError
    ├── ProductionRunError
    ├── ImmutableRecordError
    ├── NotFoundError
    │   ├── ProductNotFound
    │   ├── OrderNotFound
    │   ├── MaterialNotFound
    │   ├── ReferralNotFound
    │   └── ApplicationNotFound
    └── ValidationError
        └── InvalidStatusTransition
"""

from typing import Optional


class LunaOpsError(Exception):
    """Base exception for all service layer errors."""

    error_code = "INTERNAL_ERROR"
    status_code = 500


class InsufficientStock(LunaOpsError):
    """Raised when a ledger entry cannot cover a requested quantity."""

    error_code = "INSUFFICIENT_STOCK"
    status_code = 409

    def __init__(self, item: str, requested: float, available: Optional[float]):
        self.item = item
        self.requested = requested
        self.available = available
        if available is None:
            message = f"Inventory for {item} not found."
        else:
            message = f"Not enough stock for {item}. Only {_format_qty(available)} left."
        super().__init__(message)


class PaymentNotConfirmed(LunaOpsError):
    """Raised when the gateway does not report a successful charge."""

    error_code = "PAYMENT_NOT_CONFIRMED"
    status_code = 402

    def __init__(self, reference: str, status: Optional[str], message: Optional[str] = None):
        self.reference = reference
        self.status = status
        super().__init__(message or f"Payment not completed. Final status: {status}")


class ConfigurationError(LunaOpsError):
    """Raised when a required setting (secret, token) is missing."""

    error_code = "CONFIGURATION_ERROR"
    status_code = 500

    def __init__(self, setting: str, message: Optional[str] = None):
        self.setting = setting
        super().__init__(message or f"{setting} is not configured.")


class TransactionConflict(LunaOpsError):
    """Raised when optimistic-lock retries are exhausted."""

    error_code = "TRANSACTION_CONFLICT"
    status_code = 409

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Concurrent update conflict persisted after {attempts} attempts.")


class ExternalServiceError(LunaOpsError):
    """Raised on a non-2xx or malformed response from the payment or email provider.

    ``str(error)`` is the user-facing message; ``diagnostic`` holds provider
    detail that is logged server-side and never rendered to clients.
    """

    error_code = "EXTERNAL_SERVICE_ERROR"
    status_code = 502

    def __init__(self, service: str, message: str, diagnostic: Optional[str] = None):
        self.service = service
        self.diagnostic = diagnostic
        super().__init__(message)


class OrderCreationError(LunaOpsError):
    """Raised when an order could not be committed for a reason other than stock."""

    error_code = "ORDER_CREATION_FAILED"

    def __init__(self, reason: str, cause: Optional[Exception] = None):
        self.reason = reason
        self.cause = cause
        self.status_code = cause.status_code if isinstance(cause, LunaOpsError) else 500
        super().__init__(f"Failed to create order: {reason}")


class ProductionRunError(LunaOpsError):
    """Raised when a production run transaction fails. Keeps the cause's HTTP status."""

    error_code = "PRODUCTION_RUN_FAILED"

    def __init__(self, reason: str, cause: Optional[Exception] = None):
        self.reason = reason
        self.cause = cause
        self.status_code = cause.status_code if isinstance(cause, LunaOpsError) else 500
        super().__init__(f"Failed to log production run: {reason}")


class ImmutableRecordError(LunaOpsError):
    """Raised when an append-only or frozen record would be modified."""

    error_code = "IMMUTABLE_RECORD"
    status_code = 409


class NotFoundError(LunaOpsError):
    """Raised when a record cannot be found by id."""

    error_code = "NOT_FOUND"
    status_code = 404
    entity = "Record"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"{self.entity} {identifier!r} not found")


class ProductNotFound(NotFoundError):
    entity = "Product"


class OrderNotFound(NotFoundError):
    entity = "Order"


class MaterialNotFound(NotFoundError):
    entity = "Raw material"


class ReferralNotFound(NotFoundError):
    entity = "Referral link"


class ApplicationNotFound(NotFoundError):
    entity = "Partner application"


class ValidationError(LunaOpsError):
    """Raised when input fails a business rule."""

    error_code = "VALIDATION_ERROR"
    status_code = 422


class InvalidStatusTransition(ValidationError):
    """Raised when an order status change is not allowed by the state machine."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move order from {current!r} to {requested!r}")


def _format_qty(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
