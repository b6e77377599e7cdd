"""
Async client for the SoundCloud public API, limited to stream URL resolution.
"""

import asyncio
import json
import logging
from typing import Optional

import aiohttp
from pydantic import ValidationError

from soundcloud_sync.exceptions import ParseError, ResolutionError, TransportError
from soundcloud_sync.models.descriptor import DEFAULT_API_BASE, StreamInfo

log = logging.getLogger(__name__)

# Statuses meaning "this token may not stream this track", not a failure.
UNAVAILABLE_STATUSES = (401, 403)


class SoundCloudAPIClient:
    """
    Resolves playable stream URLs for tracks whose descriptor lacks one.

    The client does not own its session; it borrows the shared connection
    pool so that a resolve and the subsequent download reuse connections.
    """

    def __init__(self, session: aiohttp.ClientSession, api_base: str = DEFAULT_API_BASE):
        """
        Initializes the API client.

        Args:
            session: An open aiohttp session.
            api_base: Base address of the API. A trailing slash is tolerated.
        """
        self.session = session
        self.api_base = api_base.rstrip("/")

    def streams_url(self, track_id: int) -> str:
        return f"{self.api_base}/tracks/soundcloud:tracks:{track_id}/streams"

    async def resolve_stream(self, track_id: int, token: str) -> Optional[StreamInfo]:
        """
        Looks up the stream URLs of a track.

        Returns:
            The parsed stream payload, or None when the API refuses access
            (401/403) or answers with an empty or `null` body.

        Raises:
            TransportError: any other non-success status or network failure.
            ParseError: the body is not valid JSON.
            ResolutionError: the JSON is not a streams object.
        """
        url = self.streams_url(track_id)
        try:
            async with self.session.get(url, headers={"Authorization": token}) as r:
                if r.status in UNAVAILABLE_STATUSES:
                    log.debug(f"Streams for track {track_id} unavailable ({r.status})")
                    return None
                if not 200 <= r.status < 300:
                    raise TransportError(
                        f"HTTP error: {r.status} {r.reason or ''}".rstrip()
                    )
                body = await r.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.debug(f"API call to {url} failed: {e}")
            raise TransportError(str(e) or type(e).__name__) from e

        return self._parse_streams(track_id, body)

    @staticmethod
    def _parse_streams(track_id: int, body: str) -> Optional[StreamInfo]:
        text = body.strip()
        if not text or text == "null":
            return None

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON for track {track_id}: {e}") from e

        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise ResolutionError(
                f"Expected a JSON object for track {track_id}, "
                f"got {type(payload).__name__}"
            )

        try:
            return StreamInfo.model_validate(payload)
        except ValidationError as e:
            raise ResolutionError(
                f"Unexpected streams payload for track {track_id}: {e}"
            ) from e
