"""Fakes for aiohttp sessions and helpers for building media bytes."""

from io import BytesIO
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from PIL import Image

# Test token (not a real credential)
TEST_TOKEN = "OAuth test-token"  # noqa: S105

_AUTO = object()


def make_response(
    status: int = 200,
    body: bytes = b"",
    chunks: list[Any] | None = None,
    content_length: Any = _AUTO,
    reason: str = "OK",
) -> MagicMock:
    """
    Builds a mock aiohttp response.

    `chunks` may contain exceptions; they are raised when the body iterator
    reaches them, which simulates a connection dropped mid-stream.
    """
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.content_length = len(body) if content_length is _AUTO else content_length
    response.text = AsyncMock(return_value=body.decode("utf-8", errors="replace"))
    response.read = AsyncMock(return_value=body)

    parts = chunks if chunks is not None else [body]

    async def iter_chunked(_size: int):
        for part in parts:
            if isinstance(part, BaseException):
                raise part
            yield part

    response.content.iter_chunked = iter_chunked
    return response


class FakeSession:
    """Routes `get` calls by URL to canned responses and records them."""

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = dict(routes or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    def get(self, url: str, **kwargs: Any) -> MagicMock:
        self.calls.append((url, kwargs))
        target = self.routes.get(url)
        if target is None:
            target = make_response(status=404, reason="Not Found")

        cm = MagicMock()
        if isinstance(target, BaseException):
            cm.__aenter__ = AsyncMock(side_effect=target)
        else:
            cm.__aenter__ = AsyncMock(return_value=target)
        cm.__aexit__ = AsyncMock(return_value=None)
        return cm


def make_image(width: int, height: int, color: tuple[int, int, int] = (0, 128, 255)) -> bytes:
    """Encodes a solid PNG of the given size."""
    img = Image.new("RGB", (width, height), color)
    out = BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


