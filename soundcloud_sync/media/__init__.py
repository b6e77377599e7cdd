"""
Media Processing Layer.

This package is responsible for all media file operations, including
atomic downloading, artwork processing and metadata tagging.
"""

from .artwork import ArtworkProcessor
from .downloader import Downloader
from .tagger import Tagger

__all__ = ["ArtworkProcessor", "Downloader", "Tagger"]
