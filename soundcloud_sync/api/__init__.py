"""
SoundCloud API Layer.

This package handles communication with the SoundCloud public API.
"""

from .client import SoundCloudAPIClient

__all__ = ["SoundCloudAPIClient"]
