"""
Middleware Package

Custom middleware components for the API service:
- Request/response logging middleware with request IDs
- Exception handlers rendering the error envelope
"""

from .errors import register_exception_handlers
from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware", "register_exception_handlers"]
