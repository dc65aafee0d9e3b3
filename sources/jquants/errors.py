"""
Exceptions raised by the J-Quants source.

None of these are retried: the caller gets the failure with a readable message.
"""

from typing import Optional


class JQuantsError(Exception):
    """Base exception for J-Quants errors."""
    pass


class ConfigurationError(JQuantsError):
    """Raised when required configuration (the refresh token) is missing."""
    pass


class UpstreamError(JQuantsError):
    """Raised when a data endpoint returns a non-success response."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class UpstreamAuthError(UpstreamError):
    """Raised when the refresh token -> ID token exchange is rejected."""
    pass
