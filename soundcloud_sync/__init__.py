"""
soundcloud-sync: mirror SoundCloud playlists as tagged MP3 files.
"""

__version__ = "0.1.0"
