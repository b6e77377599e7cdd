"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from soundcloud_sync.models.descriptor import DEFAULT_API_BASE


class SyncConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Authentication & API
    token: str = ""
    api_base: str = DEFAULT_API_BASE

    # Sync Settings
    directory: str = ""
    max_workers: int = 10
    single_flight: bool = True

    # Artwork Options
    artwork_size: int = 500
    artwork_quality: int = 90

    # Internal fields not loaded from INI file
    config_path: str = Field(default="", repr=False)

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 32:
            raise ValueError("Max workers must be between 1 and 32.")
        return v

    @field_validator("artwork_size")
    @classmethod
    def validate_artwork_size(cls, v: int) -> int:
        if v < 16 or v > 3000:
            raise ValueError("Artwork size must be between 16 and 3000 pixels.")
        return v

    @field_validator("artwork_quality")
    @classmethod
    def validate_artwork_quality(cls, v: int) -> int:
        if v < 1 or v > 95:
            raise ValueError("Artwork quality must be between 1 and 95.")
        return v

    @field_validator("api_base")
    @classmethod
    def validate_api_base(cls, v: str) -> str:
        """Ensures the API base is an absolute HTTP(S) address."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"API base must be an http(s) URL, got: {v!r}")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
