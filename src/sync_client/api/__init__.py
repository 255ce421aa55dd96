"""API clients and communication modules."""

from .backend_client import BackendClient
from .error_handling import BackendError, ErrorCategory, ResourceNotFoundError, categorize_error

__all__ = ["BackendClient", "BackendError", "ErrorCategory", "ResourceNotFoundError", "categorize_error"]
