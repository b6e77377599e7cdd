"""
Pydantic models for SoundCloud track descriptors and sync requests/outcomes.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_API_BASE = "https://api.soundcloud.com"


def blank_to_none(value: Any) -> Any:
    """Collapses empty and whitespace-only strings to None."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TrackUser(BaseModel):
    """The uploader attributed to a track."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    username: Optional[str] = None

    @field_validator("username", mode="before")
    @classmethod
    def normalize_blank(cls, v: Any) -> Any:
        return blank_to_none(v)


class MediaDescriptor(BaseModel):
    """
    A SoundCloud track as returned by the public API.

    Only the fields the sync pipeline reads are declared; everything else in
    the payload is ignored. Empty strings are treated as missing values.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    title: Optional[str] = None
    streamable: Optional[bool] = None
    downloadable: Optional[bool] = None
    http_mp3_128_url: Optional[str] = None
    stream_url: Optional[str] = None
    download_url: Optional[str] = None
    artwork_url: Optional[str] = None
    description: Optional[str] = None
    label_name: Optional[str] = None
    genre: Optional[str] = None
    user: Optional[TrackUser] = None

    @field_validator(
        "title",
        "http_mp3_128_url",
        "stream_url",
        "download_url",
        "artwork_url",
        "description",
        "label_name",
        "genre",
        mode="before",
    )
    @classmethod
    def normalize_blank(cls, v: Any) -> Any:
        return blank_to_none(v)

    @property
    def artist(self) -> Optional[str]:
        return self.user.username if self.user else None

    @property
    def is_streamable(self) -> bool:
        return bool(self.streamable)

    @property
    def is_downloadable(self) -> bool:
        return bool(self.downloadable)


class StreamInfo(BaseModel):
    """Payload of the `/tracks/{urn}/streams` endpoint."""

    model_config = ConfigDict(extra="ignore")

    http_mp3_128_url: Optional[str] = None
    hls_mp3_128_url: Optional[str] = None
    hls_aac_160_url: Optional[str] = None
    preview_mp3_128_url: Optional[str] = None

    @field_validator(
        "http_mp3_128_url",
        "hls_mp3_128_url",
        "hls_aac_160_url",
        "preview_mp3_128_url",
        mode="before",
    )
    @classmethod
    def normalize_blank(cls, v: Any) -> Any:
        return blank_to_none(v)


class SyncRequest(BaseModel):
    """Everything needed to materialize one track on disk."""

    track: MediaDescriptor
    collection: str
    directory: str
    token: str
    api_base: str = DEFAULT_API_BASE


class SyncAction(str, Enum):
    """Terminal action of a pipeline run."""

    SKIPPED = "skipped"
    STREAMED = "streamed"
    UNSUPPORTED = "unsupported"
    ERROR = "error"


class SyncOutcome(BaseModel):
    """The result returned for every completed pipeline run."""

    action: SyncAction
    path: str
    reason: Optional[str] = None
