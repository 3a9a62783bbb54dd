"""Error taxonomy for the contact relay.

Every error carries the HTTP status and the public ``error`` message that the
API returns in its JSON body.
"""
from typing import Optional


class ContactRelayError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    error = "Failed to send"

    def __init__(self, error: Optional[str] = None, details: Optional[str] = None):
        self.error = error or self.error
        self.details = details
        super().__init__(self.error)


class UnauthorizedError(ContactRelayError):
    """Raised when the shared-secret header is absent or does not match."""

    status_code = 401
    error = "Unauthorized"


class ValidationError(ContactRelayError):
    """Raised when a submission is rejected before any external call."""

    status_code = 400
    error = "Invalid request"


class MissingFieldsError(ValidationError):
    error = "Missing required fields"


class InvalidEmailError(ValidationError):
    error = "Invalid email"


class TransportError(ContactRelayError):
    """Raised when provisioning, sanitizing or sending fails."""

    status_code = 500
    error = "Failed to send"
