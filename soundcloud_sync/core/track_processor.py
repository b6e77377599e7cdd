"""
Handles the processing of a single track, from path resolution to tagging.
"""

import logging
from pathlib import Path
from typing import Optional

import aiohttp
from rich.markup import escape

from soundcloud_sync.api.client import SoundCloudAPIClient
from soundcloud_sync.exceptions import SoundCloudSyncError
from soundcloud_sync.media import ArtworkProcessor, Downloader, Tagger
from soundcloud_sync.media.artwork import DEFAULT_QUALITY, DEFAULT_SIZE
from soundcloud_sync.media.downloader import (
    get_connection_pool,
    remove_partial,
    track_exists,
)
from soundcloud_sync.models.descriptor import SyncAction, SyncOutcome, SyncRequest
from soundcloud_sync.utils.path import resolve_track_path

log = logging.getLogger(__name__)

# Reason strings reported to callers
ALREADY_EXISTS = "already_exists"
NOT_SUPPORTED = "not_downloadable_nor_streamable"
RESOLVE_UNAVAILABLE = "stream_resolve_returned_null_or_unauthorized"
RESOLVE_FAILED = "stream_resolve_failed"
MISSING_URL = "missing_http_mp3_128_url"
TAGGING_FAILED = "tagging_failed"


def request_path(request: SyncRequest) -> Path:
    """The destination a request materializes to."""
    track = request.track
    return resolve_track_path(
        track.title, request.collection, request.directory, track.id
    )


class TrackProcessor:
    """
    Orchestrates the existence check, stream resolution, download and tagging
    of a single track.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        artwork_size: int = DEFAULT_SIZE,
        artwork_quality: int = DEFAULT_QUALITY,
    ):
        self.session = session
        self.downloader = Downloader(session)
        self.tagger = Tagger(ArtworkProcessor(session, artwork_size, artwork_quality))

    async def sync_track(self, request: SyncRequest) -> SyncOutcome:
        """
        Materializes one track on disk.

        Fetch-stage failures propagate as exceptions; every other failure is
        reported as an `error` outcome with a reason string.
        """
        track = request.track
        final_path = request_path(request)
        path_str = str(final_path)
        display_title = escape(track.title or f"track-{track.id}")

        def outcome(action: SyncAction, reason: Optional[str] = None) -> SyncOutcome:
            return SyncOutcome(action=action, path=path_str, reason=reason)

        # A stale .part must never influence the existence check
        await remove_partial(final_path)

        if await track_exists(final_path):
            log.info(f"  [yellow]○ Skipping:[/] [dim]{display_title}[/dim] (already exists)")
            return outcome(SyncAction.SKIPPED, ALREADY_EXISTS)

        if not track.is_streamable and not track.is_downloadable:
            log.info(f"  [yellow]○ Unsupported:[/] [dim]{display_title}[/dim]")
            return outcome(SyncAction.UNSUPPORTED, NOT_SUPPORTED)

        url = track.http_mp3_128_url
        if url is None and track.is_streamable:
            client = SoundCloudAPIClient(self.session, request.api_base)
            try:
                stream = await client.resolve_stream(track.id, request.token)
            except SoundCloudSyncError as e:
                log.warning(f"  [red]✗ Stream lookup failed:[/] {display_title} ({e})")
                return outcome(SyncAction.ERROR, f"{RESOLVE_FAILED}: {e}")
            if stream is None:
                log.warning(f"  [red]✗ No stream:[/] {display_title}")
                return outcome(SyncAction.ERROR, RESOLVE_UNAVAILABLE)
            url = stream.http_mp3_128_url

        if url is None:
            log.warning(f"  [red]✗ No stream URL:[/] {display_title}")
            return outcome(SyncAction.ERROR, MISSING_URL)

        await self.downloader.fetch(url, final_path, request.token)

        try:
            await self.tagger.tag_file(
                path_str,
                request.token,
                artist=track.artist,
                artwork_url=track.artwork_url,
                comment=track.description,
                label=track.label_name,
                genre=track.genre,
            )
        except Exception as e:
            log.error(
                f"  [red]✗ Tagging failed:[/] {display_title} ({e})",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return outcome(SyncAction.ERROR, f"{TAGGING_FAILED}: {e}")

        log.info(f"  [green]✓ Saved:[/] {display_title}")
        return outcome(SyncAction.STREAMED)


async def sync_track(
    request: SyncRequest, session: Optional[aiohttp.ClientSession] = None
) -> SyncOutcome:
    """Runs one request through the pipeline on the shared connection pool."""
    if session is None:
        session = await get_connection_pool()
    return await TrackProcessor(session).sync_track(request)
