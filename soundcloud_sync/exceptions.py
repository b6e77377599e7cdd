"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Broad category of a failure, for callers that match on structure."""

    TRANSPORT = "transport"
    INTEGRITY = "integrity"
    PARSE = "parse"
    RESOLUTION = "resolution"
    FILESYSTEM = "filesystem"


class SoundCloudSyncError(Exception):
    """Base exception for all application-specific errors."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(SoundCloudSyncError):
    """Raised on a non-success HTTP status or a network failure."""

    kind = ErrorKind.TRANSPORT


class IntegrityError(SoundCloudSyncError):
    """Raised when the bytes written do not match the advertised length."""

    kind = ErrorKind.INTEGRITY


class ParseError(SoundCloudSyncError):
    """Raised when a response body or an image cannot be decoded."""

    kind = ErrorKind.PARSE


class ResolutionError(SoundCloudSyncError):
    """Raised when a stream URL lookup fails for reasons other than transport."""

    kind = ErrorKind.RESOLUTION


class FilesystemError(SoundCloudSyncError):
    """Raised when the destination or its temporary file cannot be written."""

    kind = ErrorKind.FILESYSTEM


class ConfigurationError(SoundCloudSyncError):
    """Raised for issues related to configuration loading or validation."""
