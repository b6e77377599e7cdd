"""Tests for artwork URL rewriting, cropping and re-encoding."""

from io import BytesIO

import pytest
from PIL import Image

from soundcloud_sync.exceptions import ParseError, TransportError
from soundcloud_sync.media.artwork import (
    ArtworkProcessor,
    center_square_box,
    process_artwork,
    upgrade_artwork_url,
)
from tests.support.fakes import FakeSession, make_image, make_response

GREEN = (0, 200, 0)


def _striped(width: int, height: int, side: int) -> bytes:
    """Red margins around a centered green square of the given side."""
    img = Image.new("RGB", (width, height), (255, 0, 0))
    box = center_square_box(width, height)
    img.paste(GREEN, box)
    assert box[2] - box[0] == side
    out = BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


def _close(a: tuple[int, ...], b: tuple[int, ...], tolerance: int = 40) -> bool:
    return all(abs(x - y) <= tolerance for x, y in zip(a, b))


class TestCenterSquareBox:
    @pytest.mark.parametrize(
        ("width", "height", "expected"),
        [
            (300, 200, (50, 0, 250, 200)),
            (200, 300, (0, 50, 200, 250)),
            (301, 200, (50, 0, 250, 200)),
            (100, 100, (0, 0, 100, 100)),
            (1, 7, (0, 3, 1, 4)),
        ],
    )
    def test_box(self, width: int, height: int, expected: tuple) -> None:
        assert center_square_box(width, height) == expected

    @pytest.mark.parametrize(("width", "height"), [(640, 480), (33, 1000), (999, 998)])
    def test_box_is_square_of_min_side(self, width: int, height: int) -> None:
        left, top, right, bottom = center_square_box(width, height)
        side = min(width, height)
        assert (right - left, bottom - top) == (side, side)
        assert left == (width - side) // 2
        assert top == (height - side) // 2


class TestProcessArtwork:
    def test_output_is_square_jpeg_of_target_size(self) -> None:
        out = process_artwork(make_image(640, 360), size=128, quality=80)

        with Image.open(BytesIO(out)) as img:
            assert img.format == "JPEG"
            assert img.size == (128, 128)

    @pytest.mark.parametrize(("width", "height"), [(300, 200), (200, 300)])
    def test_crop_keeps_only_the_centered_square(self, width: int, height: int) -> None:
        out = process_artwork(_striped(width, height, 200), size=64)

        with Image.open(BytesIO(out)) as img:
            rgb = img.convert("RGB")
            for xy in [(2, 2), (61, 2), (2, 61), (61, 61), (32, 32)]:
                assert _close(rgb.getpixel(xy), GREEN), xy

    def test_transparent_png_is_flattened(self) -> None:
        img = Image.new("RGBA", (50, 80), (10, 20, 30, 128))
        buf = BytesIO()
        img.save(buf, format="PNG")

        out = process_artwork(buf.getvalue(), size=32)

        with Image.open(BytesIO(out)) as result:
            assert result.mode == "RGB"

    def test_garbage_is_a_parse_error(self) -> None:
        with pytest.raises(ParseError):
            process_artwork(b"definitely not an image")


class TestArtworkUrl:
    def test_large_is_upgraded(self) -> None:
        url = "https://i1.sndcdn.com/artworks-000123-abcd-large.jpg"
        assert upgrade_artwork_url(url) == (
            "https://i1.sndcdn.com/artworks-000123-abcd-t500x500.jpg"
        )

    def test_other_urls_are_untouched(self) -> None:
        url = "https://example.com/cover-original.png"
        assert upgrade_artwork_url(url) == url


class TestArtworkProcessorFetch:
    @pytest.mark.asyncio
    async def test_fetches_high_res_variant(self, token: str) -> None:
        hi_res = "https://i1.sndcdn.com/a-t500x500.jpg"
        session = FakeSession({hi_res: make_response(body=make_image(500, 400))})

        out = await ArtworkProcessor(session, size=100).fetch(
            "https://i1.sndcdn.com/a-large.jpg", token
        )

        assert session.urls == [hi_res]
        assert session.calls[0][1]["headers"] == {"Authorization": token}
        with Image.open(BytesIO(out)) as img:
            assert img.size == (100, 100)

    @pytest.mark.asyncio
    async def test_http_error(self, token: str) -> None:
        session = FakeSession()

        with pytest.raises(TransportError, match="404"):
            await ArtworkProcessor(session).fetch("https://x/a-large.jpg", token)
