"""
Change watching for Trello boards.

Trello has no "wait until something changed" call, so this package
derives one by polling:

- SnapshotBuilder: Captures a board's lists and watched cards
- ChangeDetector: Diffs two snapshots plus the activity feed
- WatchLoop: Polls until a change is found or the deadline passes

Usage:
    store = SnapshotStore()
    loop = WatchLoop(client, store)

    result = await loop.watch("board-1", list_ids=["list-a"], timeout_ms=60000)
    print(result.to_dict())
"""

from .changes import (
    ACTIVITY_SCAN_LIMIT,
    AUTOMATION_MARKER,
    CardAdded,
    CardCommented,
    CardMoved,
    ChangeDetector,
    ChangeRecord,
    DescriptionChanged,
    LabelsChanged,
)
from .loop import DEFAULT_POLL_INTERVAL_MS, DEFAULT_TIMEOUT_MS, WatchLoop, WatchResult
from .snapshot import BoardSnapshot, BoardSource, CardSnapshot, SnapshotBuilder, SnapshotStore

__all__ = [
    "ACTIVITY_SCAN_LIMIT",
    "AUTOMATION_MARKER",
    "DEFAULT_POLL_INTERVAL_MS",
    "DEFAULT_TIMEOUT_MS",
    "BoardSnapshot",
    "BoardSource",
    "CardAdded",
    "CardCommented",
    "CardMoved",
    "CardSnapshot",
    "ChangeDetector",
    "ChangeRecord",
    "DescriptionChanged",
    "LabelsChanged",
    "SnapshotBuilder",
    "SnapshotStore",
    "WatchLoop",
    "WatchResult",
]
