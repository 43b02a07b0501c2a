"""
Backend HTTP API access: envelope handling, transport and typed endpoints.
"""
from .client import ApiClient
from .transport import HttpResponse, Transport, UrllibTransport

__all__ = ["ApiClient", "HttpResponse", "Transport", "UrllibTransport"]
