"""
Application Exceptions

Errors raised by the service layer. The API renders them as
``{"success": false, "error": <message>}`` with ``status_code``.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    """Requested entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
