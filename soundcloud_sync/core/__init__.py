"""
Core application engine for orchestrating the sync process.

The `SyncManager` acts as the session coordinator, delegating each
individual track to the `TrackProcessor`.
"""

from .sync_manager import SyncManager, requests_from_playlist
from .track_processor import TrackProcessor, sync_track

__all__ = ["SyncManager", "TrackProcessor", "requests_from_playlist", "sync_track"]
