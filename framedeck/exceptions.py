# framedeck/exceptions.py

"""
Custom exceptions for the framedeck package.

These exceptions cover the failure cases of the storage layer, the HTTP API
and the API client. The API layer translates them into status codes and the
editor turns them into user-visible notices.
"""

class FramedeckError(Exception):
    """Base exception for all framedeck errors."""

class NotFoundError(FramedeckError):
    """Raised when a referenced demo or frame does not exist."""
    def __init__(self, message: str = None, resource: str = "Frame", identifier: str = None):
        msg = message or f"{resource} not found"
        if identifier is not None and message is None:
            msg = f"{msg}: {identifier}"
        super().__init__(msg)
        self.resource = resource
        self.identifier = identifier

class BadRequestError(FramedeckError):
    """Raised when a payload or argument is malformed."""
    def __init__(self, message: str = None, field: str = None):
        msg = message or "Malformed request"
        if field:
            msg = f"{msg} (field '{field}')"
        super().__init__(msg)
        self.field = field

class StorageUnavailableError(FramedeckError):
    """Raised on connection failure, pool exhaustion or a failed query."""
    def __init__(self, message: str = None, original_error: Exception = None):
        msg = message or "Storage unavailable"
        if original_error:
            msg = f"{msg}: {str(original_error)}"
        super().__init__(msg)
        self.original_error = original_error

class NetworkFailureError(FramedeckError):
    """Raised by the API client when the server cannot be reached."""
    def __init__(self, message: str = None, original_error: Exception = None):
        msg = message or "Network failure"
        if original_error:
            msg = f"{msg}: {str(original_error)}"
        super().__init__(msg)
        self.original_error = original_error

class RemoteServerError(FramedeckError):
    """Raised by the API client when the server answers with an unexpected status."""
    def __init__(self, status_code: int, message: str = None):
        super().__init__(f"Server error ({status_code}): {message or 'Unknown error'}")
        self.status_code = status_code

class TemplateError(FramedeckError):
    """Raised when there are issues with the HTML templates."""
    def __init__(self, template_path: str = None, message: str = None):
        msg = "Template error"
        if template_path:
            msg = f"{msg} with '{template_path}'"
        if message:
            msg = f"{msg}: {message}"
        super().__init__(msg)
        self.template_path = template_path

class ConfigurationError(FramedeckError):
    """Raised when there are issues with the provided configuration."""
    def __init__(self, message: str, field: str = None):
        msg = f"Configuration error"
        if field:
            msg = f"{msg} in '{field}'"
        msg = f"{msg}: {message}"
        super().__init__(msg)
        self.field = field
