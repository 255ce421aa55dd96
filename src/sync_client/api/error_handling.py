"""Error handling and categorization for backend operations."""

import asyncio
import json
from enum import Enum
from typing import Optional

import aiohttp


class ErrorCategory(Enum):
    """Categories for different types of backend errors."""
    NETWORK = "network"
    SERVER = "server"
    CLIENT = "client"
    TIMEOUT = "timeout"
    DATA = "data"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


def categorize_error(exception: Exception) -> ErrorCategory:
    """Categorize an exception into error types for better handling."""
    if isinstance(exception, BackendError):
        return exception.category
    elif isinstance(exception, asyncio.TimeoutError):
        return ErrorCategory.TIMEOUT
    elif isinstance(exception, aiohttp.ClientConnectorError):
        return ErrorCategory.NETWORK
    elif isinstance(exception, aiohttp.ClientResponseError):
        if exception.status == 404:
            return ErrorCategory.NOT_FOUND
        elif 400 <= exception.status < 500:
            return ErrorCategory.CLIENT
        elif 500 <= exception.status < 600:
            return ErrorCategory.SERVER
        else:
            return ErrorCategory.UNKNOWN
    elif isinstance(exception, aiohttp.ClientError):
        return ErrorCategory.NETWORK
    elif isinstance(exception, (json.JSONDecodeError, ValueError, KeyError, TypeError)):
        return ErrorCategory.DATA
    else:
        return ErrorCategory.UNKNOWN


class BackendError(Exception):
    """Raised when the backend is unreachable or answers with a failure envelope."""
    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN, status: Optional[int] = None):
        self.message = message
        self.category = category
        self.status = status
        super().__init__(self.message)


class ResourceNotFoundError(BackendError):
    """Raised when the requested resource (e.g. a job log) does not exist."""
    def __init__(self, message: str = "Resource not found", status: Optional[int] = 404):
        super().__init__(message, ErrorCategory.NOT_FOUND, status)
