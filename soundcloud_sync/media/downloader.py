"""
Handles the low-level downloading of files over HTTP using a write-to-temp,
verify, then rename protocol so that a destination path never holds a
partially written file.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Union

import aiofiles
import aiofiles.os
import aiohttp

from soundcloud_sync.exceptions import FilesystemError, IntegrityError, TransportError
from soundcloud_sync.utils.path import partial_path

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(max_workers: int = 10) -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession.

    The session carries no per-request state, so it is shared by the stream
    resolver, the track downloader and the artwork fetcher for the lifetime of
    the application run.

    Args:
        max_workers: Maximum concurrent syncs (should match config.max_workers).
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=max_workers * 2,
            limit_per_host=max_workers,
            ttl_dns_cache=600,
            keepalive_timeout=30,
            enable_cleanup_closed=True,
        )
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)
        _connection_pool = aiohttp.ClientSession(connector=connector, timeout=timeout)
        log.debug(f"Created connection pool with limit_per_host={max_workers}")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared connection pool closed.")


async def track_exists(path: PathLike) -> bool:
    """True only when a regular file sits at `path`; errors count as absent."""
    try:
        return await aiofiles.os.path.isfile(path)
    except OSError as e:
        log.debug(f"Existence check for '{path}' failed: {e}")
        return False


async def best_effort_remove(path: PathLike) -> None:
    """Removes a file if present. Failures are logged and ignored."""
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.debug(f"Could not remove '{path}': {e}")


async def remove_partial(final_path: PathLike) -> None:
    """Discards a leftover temporary file from an interrupted run."""
    await best_effort_remove(partial_path(Path(final_path)))


class Downloader:
    """A single-attempt streaming downloader with atomic promotion."""

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def fetch(self, url: str, destination_path: PathLike, token: str) -> int:
        """
        Streams `url` into `<destination>.part`, verifies it and renames it
        onto `destination_path`.

        On any failure the temporary file is removed and the destination is
        left as it was. Returns the number of bytes written.

        Raises:
            TransportError: non-success status or network failure.
            IntegrityError: body length differs from Content-Length.
            FilesystemError: the file could not be written or renamed.
        """
        final_path = Path(destination_path)
        temp_path = partial_path(final_path)
        promoted = False
        try:
            # Content-Length must describe the bytes that land on disk.
            headers = {"Authorization": token, "Accept-Encoding": "identity"}
            async with self.session.get(
                url, headers=headers, allow_redirects=True
            ) as response:
                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"HTTP error: {response.status} {response.reason or ''}".rstrip()
                    )

                await aiofiles.os.makedirs(final_path.parent, exist_ok=True)
                await best_effort_remove(temp_path)

                bytes_written = 0
                async with aiofiles.open(temp_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                        await f.write(chunk)
                        bytes_written += len(chunk)
                    await f.flush()
                    await asyncio.to_thread(os.fsync, f.fileno())

                expected = response.content_length
                if expected is not None and expected != bytes_written:
                    raise IntegrityError(
                        f"incomplete download: wrote {bytes_written}, expected {expected}"
                    )

            await aiofiles.os.replace(temp_path, final_path)
            promoted = True
            log.debug(f"Saved {bytes_written} bytes to '{final_path}'")
            return bytes_written

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(str(e) or type(e).__name__) from e
        except OSError as e:
            raise FilesystemError(f"Failed to write '{final_path}': {e}") from e
        finally:
            if not promoted:
                await best_effort_remove(temp_path)
