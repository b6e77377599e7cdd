"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as track descriptors, sync outcomes,
configuration and statistics.
"""

from .config import SyncConfig
from .descriptor import (
    MediaDescriptor,
    StreamInfo,
    SyncAction,
    SyncOutcome,
    SyncRequest,
)
from .stats import SyncStats

__all__ = [
    "MediaDescriptor",
    "StreamInfo",
    "SyncAction",
    "SyncConfig",
    "SyncOutcome",
    "SyncRequest",
    "SyncStats",
]
