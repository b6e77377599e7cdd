"""
Runs many sync requests concurrently and tallies their outcomes.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Iterable, Optional

import aiohttp

from soundcloud_sync.core.track_processor import TrackProcessor, request_path
from soundcloud_sync.exceptions import SoundCloudSyncError
from soundcloud_sync.models.config import SyncConfig
from soundcloud_sync.models.descriptor import (
    DEFAULT_API_BASE,
    MediaDescriptor,
    SyncAction,
    SyncOutcome,
    SyncRequest,
)
from soundcloud_sync.models.stats import SyncStats

log = logging.getLogger(__name__)


def requests_from_playlist(
    payload: Any,
    directory: str,
    token: str,
    collection: Optional[str] = None,
    api_base: str = DEFAULT_API_BASE,
) -> list[SyncRequest]:
    """
    Builds sync requests from a playlist payload (`{"title", "tracks"}`) or a
    bare list of tracks. An explicit collection name overrides the title.
    """
    if isinstance(payload, dict):
        tracks = payload.get("tracks") or []
        collection = collection or payload.get("title")
    elif isinstance(payload, list):
        tracks = payload
    else:
        raise SoundCloudSyncError(
            f"Expected a playlist object or a list of tracks, got {type(payload).__name__}"
        )

    if not collection:
        raise SoundCloudSyncError("A collection name is required for a bare track list.")

    return [
        SyncRequest(
            track=MediaDescriptor.model_validate(track),
            collection=collection,
            directory=directory,
            token=token,
            api_base=api_base,
        )
        for track in tracks
    ]


class SyncManager:
    """
    Coordinates a sync session: bounded concurrency across tracks and,
    optionally, one in-flight sync per destination path.
    """

    def __init__(self, config: SyncConfig, session: aiohttp.ClientSession):
        self.config = config
        self.stats = SyncStats()
        self.track_processor = TrackProcessor(
            session, config.artwork_size, config.artwork_quality
        )
        self._semaphore = asyncio.Semaphore(config.max_workers)
        self._destination_locks: OrderedDict[str, asyncio.Lock] = OrderedDict()
        self._max_locks = 1000
        self._locks_main = asyncio.Lock()

    async def _get_destination_lock(self, destination: str) -> asyncio.Lock:
        """Gets or creates the lock guarding a destination path."""
        async with self._locks_main:
            if destination in self._destination_locks:
                self._destination_locks.move_to_end(destination)
                return self._destination_locks[destination]

            lock = asyncio.Lock()
            self._destination_locks[destination] = lock

            # Evict oldest if over limit
            if len(self._destination_locks) > self._max_locks:
                self._destination_locks.popitem(last=False)

            return lock

    async def _run_one(self, request: SyncRequest) -> SyncOutcome:
        destination = str(request_path(request))
        async with self._semaphore:
            try:
                if self.config.single_flight:
                    lock = await self._get_destination_lock(destination)
                    async with lock:
                        outcome = await self.track_processor.sync_track(request)
                else:
                    outcome = await self.track_processor.sync_track(request)
            except SoundCloudSyncError as e:
                log.error(f"  [red]✗ Failed:[/] {destination} ({e})")
                outcome = SyncOutcome(
                    action=SyncAction.ERROR, path=destination, reason=str(e)
                )

        self.stats.record(outcome)
        return outcome

    async def sync_all(self, requests: Iterable[SyncRequest]) -> list[SyncOutcome]:
        """Syncs every request, returning outcomes in input order."""
        requests = list(requests)
        if not requests:
            log.warning("[yellow]No tracks to sync.[/yellow]")
            return []

        log.info(f"Syncing {len(requests)} tracks with {self.config.max_workers} workers")
        return list(await asyncio.gather(*(self._run_one(r) for r in requests)))
