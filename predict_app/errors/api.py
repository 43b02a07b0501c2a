"""
Backend API error classifications.

These exceptions describe what went wrong talking to the backend, so the
coordinator can map each failure onto the right user-facing behavior.
"""

from typing import Optional, Dict, Any


class ApiError(Exception):
    """Base class for failures while calling the backend API."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class NetworkError(ApiError):
    """Connection refused, DNS failure, timeout or other transport fault."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.url = url
        self.recoverable = True


class HttpStatusError(ApiError):
    """Server answered with a non-2xx status and no usable error envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.recoverable = status_code is not None and status_code >= 500


class ApiResponseError(ApiError):
    """Envelope reported ``success: false``."""

    def __init__(self, message: str, server_error: Optional[str] = None,
                 status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.server_error = server_error
        self.status_code = status_code
        self.recoverable = status_code is not None and status_code >= 500


class MalformedResponseError(ApiError):
    """Body could not be decoded or lacks the fields the client relies on."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
