"""
Dataclass for tracking sync session statistics.
"""

from dataclasses import dataclass

from soundcloud_sync.models.descriptor import SyncAction, SyncOutcome


@dataclass
class SyncStats:
    """Tallies the outcomes of a sync session."""

    processed: int = 0
    streamed: int = 0
    skipped: int = 0
    unsupported: int = 0
    errors: int = 0

    def record(self, outcome: SyncOutcome) -> None:
        """Counts one finished pipeline run."""
        self.processed += 1
        if outcome.action is SyncAction.STREAMED:
            self.streamed += 1
        elif outcome.action is SyncAction.SKIPPED:
            self.skipped += 1
        elif outcome.action is SyncAction.UNSUPPORTED:
            self.unsupported += 1
        else:
            self.errors += 1
