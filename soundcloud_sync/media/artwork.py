"""
Downloads track artwork and turns it into a square JPEG suitable for embedding.
"""

import asyncio
import logging
from io import BytesIO

import aiohttp
from PIL import Image, UnidentifiedImageError

from soundcloud_sync.exceptions import ParseError, TransportError

log = logging.getLogger(__name__)

# SoundCloud serves artwork as `...-large.jpg` (100x100) by default.
LOW_RES_SEGMENT = "-large."
HIGH_RES_SEGMENT = "-t500x500."

DEFAULT_SIZE = 500
DEFAULT_QUALITY = 90


def upgrade_artwork_url(url: str) -> str:
    """Rewrites an artwork URL to request the 500x500 variant."""
    return url.replace(LOW_RES_SEGMENT, HIGH_RES_SEGMENT)


def center_square_box(width: int, height: int) -> tuple[int, int, int, int]:
    """Returns the (left, top, right, bottom) box of the largest centered square."""
    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return left, top, left + side, top + side


def process_artwork(
    data: bytes, size: int = DEFAULT_SIZE, quality: int = DEFAULT_QUALITY
) -> bytes:
    """
    Center-crops an image to a square, resizes it to `size` x `size` with
    Lanczos resampling and encodes it as JPEG.

    Raises:
        ParseError: the bytes are not a decodable image or cannot be encoded.
    """
    try:
        with Image.open(BytesIO(data)) as img:
            # JPEG has no alpha or palette modes
            if img.mode != "RGB":
                img = img.convert("RGB")

            square = img.crop(center_square_box(*img.size))
            resized = square.resize((size, size), Image.Resampling.LANCZOS)

            output = BytesIO()
            resized.save(output, format="JPEG", quality=quality)
            return output.getvalue()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ParseError(f"Could not process artwork: {e}") from e


class ArtworkProcessor:
    """Fetches artwork over the shared session and re-encodes it."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        size: int = DEFAULT_SIZE,
        quality: int = DEFAULT_QUALITY,
    ):
        self.session = session
        self.size = size
        self.quality = quality

    async def fetch(self, url: str, token: str) -> bytes:
        """Downloads the high-resolution variant of `url` and processes it."""
        hi_res_url = upgrade_artwork_url(url)
        try:
            async with self.session.get(
                hi_res_url, headers={"Authorization": token}
            ) as response:
                if not 200 <= response.status < 300:
                    raise TransportError(
                        f"HTTP error fetching artwork: {response.status} "
                        f"{response.reason or ''}".rstrip()
                    )
                data = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(str(e) or type(e).__name__) from e

        log.debug(f"Fetched {len(data)} bytes of artwork from {hi_res_url}")
        # Pillow is CPU-bound
        return await asyncio.to_thread(process_artwork, data, self.size, self.quality)
