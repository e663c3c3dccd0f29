"""
Error types raised while acquiring device credentials.
"""

from typing import Optional


class DeviceError(Exception):
    """Base class for mock device failures."""


class TokenNotFound(DeviceError):
    """No usable credential is stored locally."""


class AuthFailed(DeviceError):
    """Auth endpoint was unreachable or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NoTokenInResponse(DeviceError):
    """Auth response carried neither the token header nor a body token."""


class TokenStorageError(DeviceError):
    """Credential could not be written to the token file."""
