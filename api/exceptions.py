"""
Client-facing error types raised by the services and route handlers.

Each error carries the message returned to the caller and the HTTP status
it maps to. The exception handlers in ``api.main`` do the translation.
"""

from typing import Dict, Optional

from fastapi import status


class APIError(Exception):
    """Base class for errors that end a request with a JSON error body."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class ValidationError(APIError):
    """Missing or malformed input."""


class DuplicateError(APIError):
    """A unique field is already taken."""


class AuthError(APIError):
    """Login credentials did not match a user."""


class Unauthorized(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreError(APIError):
    """The database call failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
