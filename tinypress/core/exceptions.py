"""Exception types raised by :mod:`tinypress`."""

from typing import Optional


class TinifyError(Exception):
    """Base exception for all tinypress errors."""


class ValidationError(TinifyError, ValueError):
    """Raised when an option or argument has the wrong type or value."""


class NotFoundError(TinifyError, FileNotFoundError):
    """Raised when the source image does not exist."""


class UnsupportedFormatError(TinifyError, ValueError):
    """Raised when the source image is not a PNG or JPEG file."""


class MissingCredentialError(TinifyError):
    """Raised when no API key is available from any source."""


class InvalidCredentialError(TinifyError, ValueError):
    """Raised when an API key is not a single non-empty string."""


class RemoteError(TinifyError):
    """Raised when the Tinify API answers with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code} {self.message}"


class AuthenticationError(RemoteError):
    """Raised when the Tinify API rejects the API key (HTTP 401)."""
