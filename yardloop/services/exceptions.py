# exceptions.py
# raised by the services, translated to HTTP responses in yardloop.api.main


class ServiceError(Exception):
    """Base class for errors a caller is expected to handle."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(ServiceError):
    """Raised when input is rejected before any write."""


class NotAuthenticated(ServiceError):
    """Raised when the action requires a user and none is resolved."""


class NotAuthorized(ServiceError):
    """Raised when the user is neither the owner nor a participant."""


class EntityNotFound(ServiceError):
    """Raised when a referenced listing, item, conversation or user does not exist."""


class Conflict(ServiceError):
    """Raised on a uniqueness violation that is not an idempotent association."""
