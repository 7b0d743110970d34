"""
Domain Errors Module

Exceptions raised by the analysis services. Every ``PulseError`` carries the
HTTP status it maps to; the API turns it into a ``{"success": false, "error": ...}``
body (see ``pulse.api.errors``).
"""


class PulseError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PulseError):
    """Raised when a request is missing required input or carries invalid input."""
    status_code = 400


class NotFoundError(PulseError):
    """Raised when a record is missing or the caller may not see it."""
    status_code = 404


class DataStoreError(PulseError):
    """Raised when a required datastore read fails."""
    status_code = 500


class ProviderError(PulseError):
    """Raised by the AI provider client. Always recovered before reaching a caller."""
    status_code = 502
