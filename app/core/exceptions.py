"""
Domain errors raised by the service layer.

Each error carries a machine-readable ``code``, a human ``message`` and
optional ``details``.  The API layer turns them into ``ActionResult``
failures (see :mod:`app.api.errors`).
"""

from typing import Optional


class DomainError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(f"{entity.lower().replace(' ', '_')}_not_found", message or f"{entity} not found", details)


class ValidationError(DomainError):
    def __init__(self, message: str, code: str = "invalid_request", details: Optional[dict] = None):
        super().__init__(code, message, details)


class PreconditionError(DomainError):
    """A required piece of state is missing (no active split, no plan...).

    Reported to callers as a normal failed result, not a server error.
    """

    def __init__(self, message: str, code: str = "precondition_missing", details: Optional[dict] = None):
        super().__init__(code, message, details)


class ConflictError(DomainError):
    def __init__(self, message: str, code: str = "conflict", details: Optional[dict] = None):
        super().__init__(code, message, details)


class CycleStatsError(DomainError):
    def __init__(self, message: str = "Failed to compute cycle statistics", details: Optional[dict] = None):
        super().__init__("cycle_stats_failed", message, details)


class AuthenticationError(DomainError):
    def __init__(self, message: str = "Not authenticated", details: Optional[dict] = None):
        super().__init__("not_authenticated", message, details)


class AuthorizationError(DomainError):
    def __init__(self, message: str = "Not authorized", details: Optional[dict] = None):
        super().__init__("not_authorized", message, details)
