"""
Console entry point: runs the Typer app and turns package errors into exit status 1.
"""

import logging
import sys

from rich.console import Console

from soundcloud_sync.cli.app import app
from soundcloud_sync.cli.formatters import format_error_with_suggestions
from soundcloud_sync.exceptions import SoundCloudSyncError

log = logging.getLogger("soundcloud_sync")


def main() -> None:
    try:
        app()
    except SoundCloudSyncError as e:
        Console(stderr=True).print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
