"""
Handles writing SoundCloud track metadata as ID3 tags to downloaded MP3 files.
"""

import asyncio
import logging
import os
from typing import Optional

import mutagen.id3 as id3
from mutagen import MutagenError
from mutagen.id3 import ID3NoHeaderError

from soundcloud_sync.media.artwork import ArtworkProcessor

log = logging.getLogger(__name__)

ID3_VERSION = 4
FRONT_COVER = 3
UTF8 = 3
ID3_HEADER_SIZE = 10
FOOTER_FLAG = 0x10


def _present(value: Optional[str]) -> Optional[str]:
    """Returns the trimmed value, or None when it is missing or blank."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _strip_id3v2(file_path: str) -> None:
    """Cuts a leading ID3v2 block out of the file using only its header fields."""
    with open(file_path, "rb") as f:
        data = f.read()
    if data[:3] != b"ID3" or len(data) < ID3_HEADER_SIZE:
        return

    size = 0
    for byte in data[6:ID3_HEADER_SIZE]:
        size = (size << 7) | (byte & 0x7F)
    end = ID3_HEADER_SIZE + size
    if data[5] & FOOTER_FLAG:
        end += ID3_HEADER_SIZE

    with open(file_path, "wb") as f:
        f.write(data[end:])


class Tagger:
    """Writes metadata tags to MP3 files that are already fully on disk."""

    def __init__(self, artwork: ArtworkProcessor):
        self.artwork = artwork

    async def tag_file(
        self,
        file_path: str,
        token: str,
        artist: Optional[str] = None,
        artwork_url: Optional[str] = None,
        comment: Optional[str] = None,
        label: Optional[str] = None,
        genre: Optional[str] = None,
    ) -> None:
        """
        Merges the given fields into the file's ID3 tag and saves it in place.

        Blank values leave the corresponding frame untouched. A tag mutagen
        cannot read is dropped and replaced by a fresh one. Any other
        exception propagates.
        """
        cover = None
        if url := _present(artwork_url):
            cover = await self.artwork.fetch(url, token)

        await asyncio.to_thread(
            self._write_tags,
            file_path,
            _present(artist),
            _present(comment),
            _present(label),
            _present(genre),
            cover,
        )
        log.debug(f"Tagged '{os.path.basename(file_path)}'")

    def _write_tags(
        self,
        file_path: str,
        artist: Optional[str],
        comment: Optional[str],
        label: Optional[str],
        genre: Optional[str],
        cover: Optional[bytes],
    ) -> None:
        try:
            audio = id3.ID3(file_path)
        except ID3NoHeaderError:
            audio = id3.ID3()
        except MutagenError as e:
            log.warning(
                f"Replacing unreadable tag in '{os.path.basename(file_path)}': {e}"
            )
            _strip_id3v2(file_path)
            audio = id3.ID3()

        if artist:
            audio.setall("TPE1", [id3.TPE1(encoding=UTF8, text=artist)])
        if genre:
            audio.setall("TCON", [id3.TCON(encoding=UTF8, text=genre)])
        if comment:
            audio.setall(
                "COMM", [id3.COMM(encoding=UTF8, lang="eng", desc="", text=comment)]
            )
        if label:
            # No named accessor for the record label; TPUB is the raw frame.
            audio.setall("TPUB", [id3.TPUB(encoding=UTF8, text=label)])
        if cover is not None:
            audio.delall("APIC")
            audio.add(
                id3.APIC(
                    encoding=UTF8,
                    mime="image/jpeg",
                    type=FRONT_COVER,
                    desc="Cover",
                    data=cover,
                )
            )

        audio.save(file_path, v2_version=ID3_VERSION)
