"""Tests for ID3 tag merging on downloaded files."""

from io import BytesIO
from pathlib import Path

import mutagen.id3 as id3
import pytest
from PIL import Image

from soundcloud_sync.exceptions import ParseError, TransportError
from soundcloud_sync.media.artwork import ArtworkProcessor
from soundcloud_sync.media.tagger import Tagger
from tests.support.fakes import FakeSession, make_image, make_response

ART_URL = "https://i1.sndcdn.com/artworks-1-large.jpg"
ART_HI_RES = "https://i1.sndcdn.com/artworks-1-t500x500.jpg"


@pytest.fixture
def mp3_file(tmp_path: Path, mp3_payload: bytes) -> Path:
    path = tmp_path / "track.mp3"
    path.write_bytes(mp3_payload)
    return path


def _tagger(routes: dict | None = None, size: int = 64) -> Tagger:
    return Tagger(ArtworkProcessor(FakeSession(routes), size=size))


@pytest.mark.asyncio
async def test_writes_all_fields(mp3_file: Path, mp3_payload: bytes, token: str) -> None:
    tagger = _tagger({ART_HI_RES: make_response(body=make_image(300, 200))})

    await tagger.tag_file(
        str(mp3_file),
        token,
        artist="DJ Test",
        artwork_url=ART_URL,
        comment="Recorded live",
        label="Indie Records",
        genre="Techno",
    )

    tags = id3.ID3(mp3_file)
    assert tags.version == (2, 4, 0)
    assert tags["TPE1"].text == ["DJ Test"]
    assert tags["TCON"].text == ["Techno"]
    assert tags["TPUB"].text == ["Indie Records"]
    assert tags.getall("COMM")[0].text == ["Recorded live"]

    covers = tags.getall("APIC")
    assert len(covers) == 1
    assert covers[0].type == 3
    assert covers[0].mime == "image/jpeg"
    with Image.open(BytesIO(covers[0].data)) as img:
        assert img.size == (64, 64)

    assert mp3_file.read_bytes().endswith(mp3_payload)


@pytest.mark.asyncio
async def test_blank_values_leave_existing_frames(mp3_file: Path, token: str) -> None:
    existing = id3.ID3()
    existing.add(id3.TPE1(encoding=3, text="Original Artist"))
    existing.add(id3.TCON(encoding=3, text="Ambient"))
    existing.add(id3.TPUB(encoding=3, text="Old Label"))
    existing.save(str(mp3_file), v2_version=3)

    await _tagger().tag_file(
        str(mp3_file), token, artist="  ", comment=None, label="", genre="Drone"
    )

    tags = id3.ID3(mp3_file)
    assert tags.version == (2, 4, 0)
    assert tags["TPE1"].text == ["Original Artist"]
    assert tags["TPUB"].text == ["Old Label"]
    assert tags["TCON"].text == ["Drone"]
    assert not tags.getall("COMM")


@pytest.mark.asyncio
async def test_values_are_trimmed(mp3_file: Path, token: str) -> None:
    await _tagger().tag_file(str(mp3_file), token, artist="  Padded  ")

    assert id3.ID3(mp3_file)["TPE1"].text == ["Padded"]


@pytest.mark.asyncio
async def test_cover_replaces_previous_covers(mp3_file: Path, token: str) -> None:
    existing = id3.ID3()
    for kind, desc in ((3, "old front"), (4, "old back")):
        existing.add(
            id3.APIC(encoding=3, mime="image/png", type=kind, desc=desc, data=b"old")
        )
    existing.save(str(mp3_file))

    tagger = _tagger({ART_HI_RES: make_response(body=make_image(120, 120))})
    await tagger.tag_file(str(mp3_file), token, artwork_url=ART_URL)

    covers = id3.ID3(mp3_file).getall("APIC")
    assert len(covers) == 1
    assert covers[0].type == 3
    assert covers[0].data != b"old"


@pytest.mark.asyncio
async def test_artwork_failure_leaves_file_untouched(
    mp3_file: Path, mp3_payload: bytes, token: str
) -> None:
    with pytest.raises(TransportError):
        await _tagger().tag_file(str(mp3_file), token, artist="X", artwork_url=ART_URL)

    assert mp3_file.read_bytes() == mp3_payload


@pytest.mark.asyncio
async def test_undecodable_artwork_is_a_parse_error(
    mp3_file: Path, mp3_payload: bytes, token: str
) -> None:
    tagger = _tagger({ART_HI_RES: make_response(body=b"<html>nope</html>")})

    with pytest.raises(ParseError):
        await tagger.tag_file(str(mp3_file), token, artwork_url=ART_URL)

    assert mp3_file.read_bytes() == mp3_payload


@pytest.mark.asyncio
async def test_unreadable_tag_is_replaced(
    mp3_file: Path, mp3_payload: bytes, token: str
) -> None:
    # ID3v2.9 header announcing a 10-byte body that mutagen refuses to parse.
    mp3_file.write_bytes(b"ID3\x09\x00\x00\x00\x00\x00\x0a" + b"\xee" * 10 + mp3_payload)

    await _tagger().tag_file(str(mp3_file), token, artist="A")

    tags = id3.ID3(mp3_file)
    assert tags.version == (2, 4, 0)
    assert tags["TPE1"].text == ["A"]
    data = mp3_file.read_bytes()
    assert data.endswith(mp3_payload)
    assert b"\xee" * 10 not in data
